"""Supabase implementation for scan history."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from shelf_score.domain.products import ScannedProduct
from shelf_score.services.history import ScanHistoryRepository


@dataclass
class SupabaseScanHistoryRepository(ScanHistoryRepository):
    """Supabase-backed scan history."""

    client: Client

    def add(self, scan: ScannedProduct) -> None:
        """Store a scan."""
        self.client.table("scan_history").insert(
            {
                "id": scan.id,
                "barcode": scan.barcode,
                "name": scan.name,
                "brand": scan.brand,
                "score": scan.score,
                "scanned_at": scan.scanned_at.isoformat(),
            }
        ).execute()

    def list_recent(self, limit: int) -> list[ScannedProduct]:
        """Return recent scans, newest first."""
        response = (
            self.client.table("scan_history")
            .select("*")
            .order("scanned_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [
            ScannedProduct(
                id=str(row["id"]),
                barcode=str(row["barcode"]),
                name=str(row.get("name") or ""),
                brand=str(row.get("brand") or ""),
                score=int(row.get("score", 0)),
                scanned_at=datetime.fromisoformat(str(row["scanned_at"])),
            )
            for row in response.data or []
        ]

    def delete(self, scan_id: str) -> None:
        """Remove a scan."""
        self.client.table("scan_history").delete().eq("id", scan_id).execute()
