from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FileUpdateRequest(BaseModel):
    """
    Allowed file metadata updates. Blank values leave the field unchanged.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    original_file_name: Optional[str] = None
