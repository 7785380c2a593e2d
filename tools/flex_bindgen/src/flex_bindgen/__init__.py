from .common import BindgenError, write_if_changed
from .config import DEFAULT_CONFIG, GeneratorConfig
from .emitter import CodeWriter, emit
from .metadata import DelegateTable, TypeKind, TypeRef, load_signatures, parse_metadata_text
from .model import BindingModel, build_model, csharp_name

__all__ = [
    "BindgenError",
    "BindingModel",
    "CodeWriter",
    "DEFAULT_CONFIG",
    "DelegateTable",
    "GeneratorConfig",
    "TypeKind",
    "TypeRef",
    "build_model",
    "csharp_name",
    "emit",
    "load_signatures",
    "parse_metadata_text",
    "write_if_changed",
]
