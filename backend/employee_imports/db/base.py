from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# upper bound of the Integer primary keys (PostgreSQL int4)
MAX_ID = 2**31 - 1
