from sqlalchemy import Column, Integer, String, JSON

from .base import Base


class College(Base):
    __tablename__ = "colleges"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    location = Column(String)  # state
    type = Column(String)  # Government / Private / Deemed University
    quota = Column(String, nullable=False, default="All India Quota")

    # {"General": 50, "OBC": 80, "SC": 150, "ST": 200, "EWS": 60}
    cutoff_ranks = Column(JSON, nullable=False, default=dict)

    fees = Column(String)  # display string, e.g. "₹5,856/year"
    seats = Column(Integer)
