from embedline.indexes.registry import Index, IndexRegistry
from embedline.indexes.schema import FieldMapping, IndexDefinition, IndexMappings, IndexSettings

__all__ = ["FieldMapping", "Index", "IndexDefinition", "IndexMappings", "IndexRegistry", "IndexSettings"]
