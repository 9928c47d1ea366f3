from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from shared.database import Base

# Accounts are owned by the identity service; this table is read-only here
# and exists so results can reference a real student.
class User(Base):
    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    login: Mapped[str] = mapped_column(String(150), unique=True)
    role: Mapped[str] = mapped_column(String(20), default="student")  # student/teacher/admin
