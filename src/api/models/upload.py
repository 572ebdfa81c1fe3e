"""
API models for the upload endpoints.

The upload endpoints answer with the bare CID as plain text, so these models
only describe validation errors and the OpenAPI request bodies.
"""

from pydantic import BaseModel, Field
from typing import Any, List

class ValidationErrorItem(BaseModel):
    """A single request validation failure."""
    type: str = Field("field", description="Kind of validated element")
    value: Any = Field(None, description="Offending value as received")
    msg: str = Field(..., description="Human-readable error message")
    path: str = Field("", description="Location of the value inside the body")
    location: str = Field("body", description="Part of the request that was validated")

class ValidationErrorResponse(BaseModel):
    """400 response for /uploadJson."""
    errors: List[ValidationErrorItem] = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "errors": [
                    {"type": "field", "value": [1, 2, 3], "msg": "Invalid value", "path": "", "location": "body"}
                ]
            }
        }

JSON_UPLOAD_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {
                "schema": {
                    "type": "object",
                    "additionalProperties": True,
                    "description": "JSON object to upload to IPFS",
                },
                "example": {
                    "name": "John Doe",
                    "age": 30,
                    "city": "New York",
                    "country": "USA",
                },
            }
        },
    }
}

FILE_UPLOAD_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "required": ["file"],
                    "properties": {
                        "file": {
                            "type": "string",
                            "format": "binary",
                            "description": "File to upload to IPFS",
                        }
                    },
                }
            }
        },
    }
}

CID_RESPONSE = {
    "description": "IPFS hash (CID) of the pinned content",
    "content": {"text/plain": {"schema": {"type": "string"}, "example": "QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"}},
}

UPSTREAM_ERROR_RESPONSE = {
    "description": "Error uploading to IPFS",
    "content": {"text/plain": {"schema": {"type": "string"}, "example": "Something broke!"}},
}
