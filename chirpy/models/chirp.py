from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from chirpy.models.base_model import Base, BaseModel

MAX_CHIRP_LENGTH = 140


class Chirp(BaseModel, Base):
    __tablename__ = "chirps"

    body = Column(String(MAX_CHIRP_LENGTH), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="chirps")

    def __repr__(self):
        return f"<Chirp id={self.id} user_id={self.user_id}>"
