"""
Static complaint categories and the department each one routes to.

Order matters: the keyword classifier returns the first matching category
and the label classifier keeps the first category on score ties.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from saarthi.models.classification import DepartmentDetails, PriorityTier


@dataclass(frozen=True)
class Category:
    name: str
    keywords: Tuple[str, ...]
    department: str
    department_details: DepartmentDetails
    deadline: float  # days
    priority: PriorityTier
    description: str


def _details(head: str, email: str, working_hours: str, response_time: str) -> DepartmentDetails:
    return DepartmentDetails(
        head=head,
        contact="1800-XXX-XXXX",
        email=email,
        working_hours=working_hours,
        response_time=response_time,
    )


CATEGORIES: List[Category] = [
    Category(
        name="INFRASTRUCTURE",
        keywords=("pothole", "road", "street", "asphalt", "concrete", "damage", "crack", "hole", "broken", "repair"),
        department="Public Works Department",
        department_details=_details("Mr. Rajesh Kumar", "pwd@gnoaida.gov.in", "9:00 AM - 5:00 PM", "24 hours"),
        deadline=7,
        priority=PriorityTier.HIGH,
        description="Road infrastructure, street maintenance, and public works",
    ),
    Category(
        name="SANITATION",
        keywords=("garbage", "trash", "waste", "litter", "dumpster", "bin", "dirt", "clean", "sweep", "hygiene"),
        department="Sanitation Department",
        department_details=_details("Mrs. Priya Sharma", "sanitation@gnoaida.gov.in", "6:00 AM - 2:00 PM", "12 hours"),
        deadline=3,
        priority=PriorityTier.MEDIUM,
        description="Waste management, street cleaning, and public hygiene",
    ),
    Category(
        name="WATER",
        keywords=("water", "leak", "pipe", "flood", "drainage", "sewage", "overflow", "blocked", "drain", "waterlogging"),
        department="Water Supply Department",
        department_details=_details("Mr. Amit Singh", "water@gnoaida.gov.in", "8:00 AM - 4:00 PM", "6 hours"),
        deadline=5,
        priority=PriorityTier.HIGH,
        description="Water supply, drainage, and sewage management",
    ),
    Category(
        name="ELECTRICITY",
        keywords=("electricity", "power", "wire", "cable", "transformer", "pole", "outage", "spark", "short circuit", "fault"),
        department="Electricity Department",
        department_details=_details("Mr. Vikram Patel", "power@gnoaida.gov.in", "24/7", "2 hours"),
        deadline=4,
        priority=PriorityTier.HIGH,
        description="Power supply, street lighting, and electrical maintenance",
    ),
    Category(
        name="TRAFFIC",
        keywords=("traffic", "signal", "light", "sign", "road", "vehicle", "jam", "congestion", "accident", "parking"),
        department="Traffic Department",
        department_details=_details("Mr. Suresh Verma", "traffic@gnoaida.gov.in", "24/7", "30 minutes"),
        deadline=5,
        priority=PriorityTier.MEDIUM,
        description="Traffic management, road safety, and parking",
    ),
    Category(
        name="PARKS",
        keywords=("park", "garden", "tree", "plant", "grass", "playground", "bench", "fountain", "path", "maintenance"),
        department="Parks and Recreation",
        department_details=_details("Mrs. Meera Gupta", "parks@gnoaida.gov.in", "7:00 AM - 7:00 PM", "48 hours"),
        deadline=10,
        priority=PriorityTier.LOW,
        description="Public parks, gardens, and recreational facilities",
    ),
    Category(
        name="SECURITY",
        keywords=("security", "crime", "theft", "vandalism", "safety", "police", "cctv", "lighting", "patrol"),
        department="Security Department",
        department_details=_details("Mr. Rakesh Sharma", "security@gnoaida.gov.in", "24/7", "15 minutes"),
        deadline=2,
        priority=PriorityTier.HIGH,
        description="Public safety, security, and law enforcement",
    ),
    Category(
        name="EDUCATION",
        keywords=("school", "education", "classroom", "building", "facility", "playground", "library", "computer"),
        department="Education Department",
        department_details=_details("Mrs. Anita Desai", "education@gnoaida.gov.in", "9:00 AM - 5:00 PM", "72 hours"),
        deadline=14,
        priority=PriorityTier.MEDIUM,
        description="Educational facilities and infrastructure",
    ),
    Category(
        name="HEALTH",
        keywords=("hospital", "clinic", "medical", "health", "ambulance", "emergency", "doctor", "nurse", "medicine"),
        department="Health Department",
        department_details=_details("Dr. Sunil Kumar", "health@gnoaida.gov.in", "24/7", "1 hour"),
        deadline=3,
        priority=PriorityTier.HIGH,
        description="Healthcare facilities and medical services",
    ),
]

GENERAL = Category(
    name="GENERAL",
    keywords=(),
    department="General Administration",
    department_details=_details("Mr. General Manager", "general@gnoaida.gov.in", "9:00 AM - 5:00 PM", "72 hours"),
    deadline=14,
    priority=PriorityTier.LOW,
    description="General administrative issues",
)

CATEGORIES_BY_NAME: Dict[str, Category] = {c.name: c for c in CATEGORIES + [GENERAL]}
