"""
Excel/CSV processing service for guest list import/export
"""

import io
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from wedding_planner.services.guest_service import GUEST_CATEGORIES, RSVP_STATUSES, GuestService
from wedding_planner.services.repositories import StoreError, TableStore

# Header (lowercased) -> guest field
COLUMN_MAP = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "category": "category",
    "dietary restrictions": "dietary_restrictions",
    "dietary_restrictions": "dietary_restrictions",
    "plus one": "plus_one",
    "plus_one": "plus_one",
    "rsvp status": "rsvp_status",
    "rsvp_status": "rsvp_status",
    "notes": "notes",
}

EXPORT_COLUMNS = ["Name", "Email", "Phone", "Category", "Dietary Restrictions", "Plus One", "RSVP Status", "Notes"]

class ExcelService:
    """Service for handling guest list spreadsheets"""

    REQUIRED_COLUMNS = ["name", "email"]

    @staticmethod
    def create_template() -> bytes:
        """Create Excel template with the guest list columns"""
        df = pd.DataFrame(columns=EXPORT_COLUMNS)

        # Sample rows for guidance
        sample_data = [
            ["Sample Guest 1", "guest1@example.com", "555-0100", "family", "", "yes", "confirmed", ""],
            ["Sample Guest 2", "guest2@example.com", "", "friend", "vegetarian", "no", "pending", ""],
            ["Sample Guest 3", "guest3@example.com", "", "colleague", "nut allergy", "no", "pending", "Arrives late"],
        ]

        for row in sample_data:
            df.loc[len(df)] = row

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Guest List")

        return buffer.getvalue()

    @staticmethod
    def read_file(file_content: bytes, filename: Optional[str] = None) -> pd.DataFrame:
        if filename and filename.lower().endswith(".csv"):
            return pd.read_csv(io.BytesIO(file_content), dtype=str, keep_default_na=False)
        return pd.read_excel(io.BytesIO(file_content), dtype=str, keep_default_na=False)

    @staticmethod
    def column_mapping(df: pd.DataFrame) -> Dict[str, str]:
        """Guest field -> column name in the sheet (case-insensitive headers)"""
        mapping = {}
        for col in df.columns:
            field = COLUMN_MAP.get(str(col).lower().strip())
            if field and field not in mapping:
                mapping[field] = col
        return mapping

    @staticmethod
    def validate_excel_structure(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate file structure"""
        errors = []

        mapping = ExcelService.column_mapping(df)
        missing_columns = [col for col in ExcelService.REQUIRED_COLUMNS if col not in mapping]

        if missing_columns:
            errors.append(f"Missing required columns: {', '.join(missing_columns)}")

        return len(errors) == 0, errors

    @staticmethod
    def validate_data_constraints(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Duplicate emails within the sheet are rejected"""
        errors = []
        mapping = ExcelService.column_mapping(df)

        if "email" in mapping:
            emails = df[mapping["email"]].astype(str).str.strip().str.lower()
            emails = emails[emails != ""]
            counts = emails.value_counts()
            for email, count in counts[counts > 1].items():
                errors.append(f"Duplicate email '{email}' ({count} times)")

        return len(errors) == 0, errors

    @staticmethod
    def normalize_row(row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Sheet row -> guest values; ``None`` when name or email is missing"""
        guest = {}
        for field, value in row.items():
            text = "" if value is None or pd.isna(value) else str(value).strip()
            if field == "plus_one":
                guest[field] = text.lower() in ("yes", "true", "1")
            elif field == "rsvp_status":
                guest[field] = text.lower() if text.lower() in RSVP_STATUSES else "pending"
            elif field == "category":
                guest[field] = text.lower() if text.lower() in GUEST_CATEGORIES else "other"
            else:
                guest[field] = text or None

        if not guest.get("name") or not guest.get("email"):
            return None

        guest.setdefault("category", "other")
        guest.setdefault("rsvp_status", "pending")
        guest.setdefault("plus_one", False)
        return guest

    @staticmethod
    def process_upload(
        file_content: bytes,
        store: TableStore,
        filename: Optional[str] = None,
    ) -> Tuple[bool, List[str], int]:
        """Import a guest list; existing guests (matched by email) are updated"""
        try:
            df = ExcelService.read_file(file_content, filename)
        except Exception as e:
            return False, [f"Error reading file: {str(e)}"], 0

        valid_structure, structure_errors = ExcelService.validate_excel_structure(df)
        if not valid_structure:
            return False, structure_errors, 0

        valid_data, data_errors = ExcelService.validate_data_constraints(df)
        if not valid_data:
            return False, data_errors, 0

        mapping = ExcelService.column_mapping(df)
        errors = []
        imported = 0

        for _, row in df.iterrows():
            guest = ExcelService.normalize_row({field: row[col] for field, col in mapping.items()})
            if guest is None:
                continue

            try:
                existing = GuestService.find_by_email(store, guest["email"])
                if existing:
                    values = {key: value for key, value in guest.items() if key != "email"}
                    GuestService.update_guest(store, existing["id"], values)
                else:
                    GuestService.create_guest(store, guest)
                imported += 1
            except StoreError as e:
                errors.append(f"Error with guest {guest['name']} ({guest['email']}): {str(e)}")

        return True, errors, imported

    @staticmethod
    def export_guests(store: TableStore, file_format: str = "xlsx") -> bytes:
        """Export current guest list to Excel (or CSV)"""
        guests = sorted(GuestService.list_guests(store), key=lambda g: (g.get("name") or "").lower())

        data = []
        for guest in guests:
            data.append({
                "Name": guest["name"],
                "Email": guest["email"],
                "Phone": guest.get("phone") or "",
                "Category": guest.get("category") or "other",
                "Dietary Restrictions": guest.get("dietary_restrictions") or "",
                "Plus One": "Yes" if guest.get("plus_one") else "No",
                "RSVP Status": guest.get("rsvp_status") or "pending",
                "Notes": guest.get("notes") or "",
            })

        df = pd.DataFrame(data, columns=EXPORT_COLUMNS)

        if file_format == "csv":
            return df.to_csv(index=False).encode("utf-8")

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Guest List")

        return buffer.getvalue()
