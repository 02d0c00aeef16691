from dataclasses import dataclass

from svs_model import ServiceLevelObjectives, StreamSettings

from .Message import OutMessage, OutMessageType, encode_json


@dataclass(frozen=True)
class OutConnect(OutMessage):
    """Opens the session, announcing the current settings and objectives."""
    TYPE = OutMessageType.CONNECT

    settings: StreamSettings
    slos: ServiceLevelObjectives

    def encode_content(self) -> bytes:
        return encode_json({
            "stream_settings": self.settings.to_dict(),
            "slos": self.slos.to_dict(),
        })
