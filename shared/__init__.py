"""Normalization helpers shared by storage, API and display code."""
from .dates import to_postgres_date
from .embeddings import cosine_similarity, from_pg_vector, to_pg_vector
from .skills import SKILLS_DELIMITER, join_skills, parse_skills

__all__ = [
    "SKILLS_DELIMITER",
    "cosine_similarity",
    "from_pg_vector",
    "join_skills",
    "parse_skills",
    "to_pg_vector",
    "to_postgres_date",
]
