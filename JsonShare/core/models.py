from pydantic import BaseModel, Field


class UploadReceipt(BaseModel):
    message: str = "File uploaded successfully"
    key: str = Field(..., examples=["report_alice.json"])
    size: int


class ErrorResponse(BaseModel):
    error: str  # machine-readable kind, e.g. "InvalidJson"
    detail: str


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str
    version: str
    storage: str
