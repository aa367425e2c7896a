# signup/schemas/common.py
from pydantic import BaseModel


class MessageOut(BaseModel):
    ok: bool = True
    message: str


# ids and capacities are INTEGER columns (int4 on PostgreSQL)
MAX_DB_INT = 2_147_483_647
