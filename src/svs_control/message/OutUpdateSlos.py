from dataclasses import dataclass

from svs_model import ServiceLevelObjectives

from .Message import OutMessage, OutMessageType, encode_json


@dataclass(frozen=True)
class OutUpdateSlos(OutMessage):
    TYPE = OutMessageType.UPDATE_SLOS

    slos: ServiceLevelObjectives

    def encode_content(self) -> bytes:
        return encode_json({
            "slos": self.slos.to_dict(),
        })
