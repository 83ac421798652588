from abc import ABC, abstractmethod
from typing import Any
from greenwave.domain.models import ConfigUpdate

class Command(ABC):
    @abstractmethod
    def execute(self, kernel: Any):
        pass

class UpdateConfigCommand(Command):
    def __init__(self, updates: ConfigUpdate):
        self.updates = updates

    def execute(self, kernel: Any):
        return kernel.update_config(self.updates)

class StartCommand(Command):
    def execute(self, kernel: Any):
        kernel.start()

class PauseCommand(Command):
    def execute(self, kernel: Any):
        kernel.pause()

class ResetCommand(Command):
    def execute(self, kernel: Any):
        kernel.reset()
