from pipeheattransfer.controller.component import PipeHeatTransfer, PipeReport
from pipeheattransfer.model.pipe import PipeConfig, PipeInputError

__all__ = ["PipeHeatTransfer", "PipeReport", "PipeConfig", "PipeInputError"]
