"""Per-record image ETL: sample, transform and load training tensors."""

from image_etl.config import ImageConfig, MulticropConfig
from image_etl.decoded import Decoded
from image_etl.errors import (
    ConfigurationError,
    DecodeError,
    TransportError,
    UnsupportedPolicyError,
)
from image_etl.extract import ImageExtractor
from image_etl.loader import ImageLoader
from image_etl.params import ParamFactory, TransformParams
from image_etl.provider import ImageProvider
from image_etl.transforms import ImageTransformer, MulticropTransformer

__version__ = "0.0.1"

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "Decoded",
    "ImageConfig",
    "ImageExtractor",
    "ImageLoader",
    "ImageProvider",
    "ImageTransformer",
    "MulticropConfig",
    "MulticropTransformer",
    "ParamFactory",
    "TransformParams",
    "TransportError",
    "UnsupportedPolicyError",
    "__version__",
]
