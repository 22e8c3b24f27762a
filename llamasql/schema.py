from __future__ import annotations

import re
from typing import Dict, List

PATIENTS_TABLE = """
CREATE TABLE IF NOT EXISTS patients (
    patient_id INTEGER PRIMARY KEY,
    first_name VARCHAR(30) NOT NULL,
    last_name VARCHAR(30) NOT NULL,
    gender CHAR(1) NOT NULL,
    birth_date DATE NOT NULL,
    city VARCHAR(30),
    province_id CHAR(2),
    allergies VARCHAR(80),
    height DECIMAL(3,0),
    weight DECIMAL(4,0),
    FOREIGN KEY (province_id) REFERENCES province_names(province_id)
);"""

DOCTORS_TABLE = """
CREATE TABLE IF NOT EXISTS doctors (
    doctor_id INTEGER PRIMARY KEY,
    first_name VARCHAR(30) NOT NULL,
    last_name VARCHAR(30) NOT NULL,
    specialty VARCHAR(25)
);"""

ADMISSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS admissions (
    patient_id INTEGER NOT NULL,
    admission_date DATE NOT NULL,
    discharge_date DATE,
    diagnosis VARCHAR(50),
    attending_doctor_id INTEGER,
    FOREIGN KEY (patient_id) REFERENCES patients(patient_id),
    FOREIGN KEY (attending_doctor_id) REFERENCES doctors(doctor_id)
);"""

PROVINCE_NAMES_TABLE = """
CREATE TABLE IF NOT EXISTS province_names (
    province_id CHAR(2) PRIMARY KEY,
    province_name VARCHAR(30) NOT NULL
);"""

# Creation order respects the foreign keys.
DDL_STATEMENTS = [PROVINCE_NAMES_TABLE, PATIENTS_TABLE, DOCTORS_TABLE, ADMISSIONS_TABLE]

TABLE_NAMES = ["province_names", "patients", "doctors", "admissions"]

SCHEMA_TEXT = "\n".join([PATIENTS_TABLE, DOCTORS_TABLE, ADMISSIONS_TABLE, PROVINCE_NAMES_TABLE])

SYSTEM_PROMPT = f"""
You are an expert SQLite text-to-SQL assistant.
Rules:
1) ALWAYS call the "get_from_db" tool with a complete SQLite query.
2) Use double quotes for all identifiers: "patients", "first_name", etc.
3) Prefer SELECT queries that return exactly what the user asked for.
4) DO NOT add commentary, explanation, or markdown. The tool returns JSON; that JSON must be the final output.
5) If the user asks for the SQL itself, still call the tool with that SQL so the server can return structured JSON.
Database schema:
{SCHEMA_TEXT}
""".strip()

_CREATE_RE = re.compile(r"CREATE TABLE IF NOT EXISTS (\w+) \((.*)\);", re.S)
_COLUMN_RE = re.compile(r"^\s*(\w+)\s+[A-Z]")


def describe_schema() -> Dict[str, List[str]]:
    """Return ``{table: [column, ...]}`` parsed from the DDL constants."""
    tables: Dict[str, List[str]] = {}
    for ddl in DDL_STATEMENTS:
        m = _CREATE_RE.search(ddl)
        if not m:
            continue
        columns = []
        for line in m.group(2).splitlines():
            col = _COLUMN_RE.match(line)
            if col and col.group(1).upper() != "FOREIGN":
                columns.append(col.group(1))
        tables[m.group(1)] = columns
    return tables
