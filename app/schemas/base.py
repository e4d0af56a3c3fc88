"""
Shared pydantic base for records exchanged with the browser and the CRM API
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
import re

# Same loose check the registration and client forms have always used
EMAIL_PATTERN = re.compile(r'\S+@\S+\.\S+')

class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire; either spelling accepted on input"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

def validate_email_format(v):
    if v and not EMAIL_PATTERN.search(v):
        raise ValueError('Please enter a valid email address')
    return v
