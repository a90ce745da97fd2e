import datetime as dt
from pydantic import BaseModel, ConfigDict

class ImportRunOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    kind: str
    file_name: str
    file_hash: str
    status: str
    rows_loaded: int
    started_at: dt.datetime | None
    finished_at: dt.datetime | None

class ImportErrorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    row_num: int | None
    column: str | None
    message: str

class WbsImportOut(BaseModel):
    run: ImportRunOut
    created: int
    updated: int
    errors: list[str]

class WbsParseOut(BaseModel):
    rows: list[dict]
    errors: list[str]
