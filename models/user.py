from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Date, JSON
from sqlalchemy.orm import relationship

# Fields a user may change through the profile endpoints
PROFILE_FIELDS = ("full_name", "birthday", "phone", "gender")


class User(BaseModel, Base):
    __tablename__ = "users"
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)
    birthday = Column(Date, nullable=True)
    phone = Column(String(11), nullable=True)
    gender = Column(String(32), nullable=True)
    permissions = Column(JSON, nullable=False, default=list)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User {self.email}>"
