from embedline.models.model import Deployment, Model, ModelState
from embedline.models.registry import ModelRegistry

__all__ = ["Deployment", "Model", "ModelRegistry", "ModelState"]
