from .model import get_models, display_models, select_model, model_names
from .stream import generate

__all__ = ["get_models", "display_models", "select_model", "model_names", "generate"]
