from pydantic import BaseModel


class PosterUploadResponse(BaseModel):
    url: str
    file_name: str
    message: str = "File uploaded successfully"
