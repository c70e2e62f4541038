"""
Shared fixtures for the prediction engine tests.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import pytest

from prediction.logic import Institution


@pytest.fixture
def catalog():
    """
    Small catalog covering every type and quota.

    At rank 1100 (General) the expected chances are:
      Seth GS 50, Lady Hardinge 25, Grant 65, Maulana Azad 65,
      Kasturba 95, JSS 95; AIIMS and CMC are out of reach and
      Kerala College publishes no General cutoff.
    """
    return [
        Institution(
            name="AIIMS New Delhi",
            location="Delhi",
            type="Government",
            quota="All India Quota",
            cutoff_ranks={"General": 50, "OBC": 80, "SC": 150, "ST": 200, "EWS": 60},
            fees="₹5,856/year",
            seats=125,
        ),
        Institution(
            name="Maulana Azad Medical College",
            location="Delhi",
            type="Government",
            quota="State Quota",
            cutoff_ranks={"General": 1200, "OBC": 1800, "SC": 3000, "ST": 3500, "EWS": 1400},
            fees="₹30,000/year",
            seats=250,
        ),
        Institution(
            name="Grant Medical College",
            location="Maharashtra",
            type="Government",
            quota="AllIndia",
            cutoff_ranks={"General": 1200, "OBC": 1800, "SC": 3000, "ST": 3500, "EWS": 1400},
            fees="₹45,000/year",
            seats=260,
        ),
        Institution(
            name="Kasturba Medical College",
            location="Karnataka",
            type="Private",
            quota="Management",
            cutoff_ranks={"General": 8000, "OBC": 12000, "SC": 18000, "ST": 20000, "EWS": 9000},
            fees="₹24,50,000/year",
            seats=250,
        ),
        Institution(
            name="Christian Medical College",
            location="Tamil Nadu",
            type="Private",
            quota="All India Quota",
            cutoff_ranks={"General": 500, "OBC": 700, "SC": 1200, "ST": 1500, "EWS": 600},
            fees="₹6,50,000/year",
            seats=100,
        ),
        Institution(
            name="JSS Medical College",
            location="Karnataka",
            type="DeemedUniversity",
            quota="NRI",
            cutoff_ranks={"General": 15000, "OBC": 20000, "SC": 30000, "ST": 35000, "EWS": 17000},
            seats=200,
        ),
        Institution(
            name="Kerala College",
            location="Kerala",
            type="Government",
            cutoff_ranks={"OBC": 3000, "General": 0},
            fees="₹35,000/year",
        ),
        Institution(
            name="Seth GS Medical College",
            location="Maharashtra",
            type="Government",
            quota="State",
            cutoff_ranks={"General": 800},
            fees="₹60,000/year",
        ),
        Institution(
            name="Lady Hardinge Medical College",
            location="Delhi",
            type="Government",
            quota="All India Quota",
            cutoff_ranks={"General": 880},
            fees="₹25,000/year",
        ),
    ]
