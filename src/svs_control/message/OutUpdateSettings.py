from dataclasses import dataclass

from svs_model import StreamSettings

from .Message import OutMessage, OutMessageType, encode_json


@dataclass(frozen=True)
class OutUpdateSettings(OutMessage):
    TYPE = OutMessageType.UPDATE_SETTINGS

    settings: StreamSettings

    def encode_content(self) -> bytes:
        return encode_json({
            "stream_settings": self.settings.to_dict(),
        })
