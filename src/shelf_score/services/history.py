"""Scan history service."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from shelf_score.domain.products import Product, ScannedProduct


class ScanHistoryRepository(Protocol):
    """Persistence interface for scan history."""

    def add(self, scan: ScannedProduct) -> None:
        """Store a scan."""

    def list_recent(self, limit: int) -> list[ScannedProduct]:
        """Return recent scans, newest first."""

    def delete(self, scan_id: str) -> None:
        """Remove a scan."""


@dataclass
class HistoryService:
    """Records and lists scanned products."""

    repository: ScanHistoryRepository

    def record(self, product: Product) -> ScannedProduct:
        """Record a successful product scan."""
        scan = ScannedProduct(
            id=str(uuid4()),
            barcode=product.barcode,
            name=product.display_name,
            brand=product.brand,
            score=product.health_score.score,
            scanned_at=datetime.now(tz=UTC),
        )
        self.repository.add(scan)
        return scan

    def recent(self, limit: int = 50) -> list[ScannedProduct]:
        """Return recent scans, newest first."""
        return self.repository.list_recent(limit)

    def remove(self, scan_id: str) -> None:
        """Delete a scan from history."""
        self.repository.delete(scan_id)
