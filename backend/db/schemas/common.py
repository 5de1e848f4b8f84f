"""
Shared document model settings
Stored field names are camelCase; Python attributes are snake_case.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Base for documents written to MongoDB"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
    )

    def to_document(self) -> dict:
        """Mongo document with camelCase keys, ObjectId/datetime values untouched"""
        return self.model_dump(by_alias=True)
