from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    # wire names are camelCase (isAdmin, createdById); python side stays snake_case
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
