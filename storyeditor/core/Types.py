from enum import Enum, auto


class BlockType(Enum):
    MESSAGE = "message"
    IMAGE = "image"
    QUESTION = "question"
    LIST = "list"
    LOCATION = "location"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    STICKER = "sticker"
    END = "end"

    @staticmethod
    def parse(value) -> 'BlockType':
        if isinstance(value, BlockType):
            return value
        try:
            return BlockType(value)
        except ValueError:
            raise ValueError(f"Unknown block type '{value}'") from None


class SessionStatus(Enum):
    UNINITIALIZED = auto()
    LOADING = auto()  # init() is between clearing the surface and drawing connections
    READY = auto()


class AnchorSide(Enum):
    RIGHT = "Right"
    LEFT = "Left"


class EndpointShape(Enum):
    DOT = "Dot"
    RECTANGLE = "Rectangle"
