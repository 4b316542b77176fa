"""Forecast result storage."""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Dict, Any

from yieldcast.core.models import ForecastResult

logger = logging.getLogger(__name__)


class ForecastStorage:
    """
    Persistent storage for forecast snapshots.

    Uses JSON files for simplicity and human-readability.
    Directory structure:
        storage_dir/
            forecasts/
                {label}/
                    {timestamp}.json
    """

    def __init__(self, storage_dir: Optional[Path] = None, include_yields: bool = False):
        """
        Initialize storage.

        Args:
            storage_dir: Base directory for storage (default: ~/.yieldcast)
            include_yields: Store raw trial yields alongside the summary
        """
        if storage_dir is None:
            storage_dir = Path.home() / ".yieldcast"

        self.storage_dir = Path(storage_dir)
        self.forecasts_dir = self.storage_dir / "forecasts"
        self.include_yields = include_yields

        self.forecasts_dir.mkdir(parents=True, exist_ok=True)

    def save_forecast(
        self,
        result: ForecastResult,
        forecast_id: Optional[str] = None,
    ) -> str:
        """
        Save a forecast snapshot.

        Args:
            result: Forecast to save
            forecast_id: Optional custom ID (default: creation timestamp)

        Returns:
            Forecast ID
        """
        if forecast_id is None:
            forecast_id = result.created_at.strftime("%Y%m%d_%H%M%S_%f")

        label_dir = self.forecasts_dir / self._safe_label(result.label)
        label_dir.mkdir(parents=True, exist_ok=True)

        data = result.to_dict(include_yields=self.include_yields)
        data["_id"] = forecast_id
        data["_saved_at"] = datetime.now(timezone.utc).isoformat()

        with open(label_dir / f"{forecast_id}.json", "w") as f:
            json.dump(data, f, indent=2)

        logger.info(f"Saved forecast: {result.label}/{forecast_id}")
        return forecast_id

    def load_forecast(self, label: str, forecast_id: str) -> Optional[ForecastResult]:
        """
        Load a forecast snapshot.

        Returns:
            ForecastResult or None if not found
        """
        file_path = self.forecasts_dir / self._safe_label(label) / f"{forecast_id}.json"

        if not file_path.exists():
            logger.warning(f"Forecast not found: {label}/{forecast_id}")
            return None

        with open(file_path, "r") as f:
            data = json.load(f)

        data.pop("_id", None)
        data.pop("_saved_at", None)

        return ForecastResult.from_dict(data)

    def list_forecasts(self, label: str) -> List[Dict[str, Any]]:
        """
        List all snapshots for a label, newest first.

        Returns:
            List of forecast summaries
        """
        label_dir = self.forecasts_dir / self._safe_label(label)

        if not label_dir.exists():
            return []

        forecasts = []
        for file_path in label_dir.glob("*.json"):
            with open(file_path, "r") as f:
                data = json.load(f)

            summary = data.get("summary", {})
            forecasts.append({
                "id": data.get("_id", file_path.stem),
                "label": data.get("label"),
                "created_at": data.get("created_at"),
                "capital": data.get("capital"),
                "volatility": data.get("conditions", {}).get("volatility"),
                "mean_yield": summary.get("mean_yield"),
                "std_dev": summary.get("std_dev"),
                "sharpe_ratio": summary.get("sharpe_ratio"),
                "success_rate": summary.get("success_rate"),
            })

        forecasts.sort(key=lambda x: x.get("created_at") or "", reverse=True)
        return forecasts

    def list_labels(self) -> List[str]:
        """List labels that have stored snapshots."""
        return sorted(p.name for p in self.forecasts_dir.iterdir() if p.is_dir())

    def get_latest_forecast(self, label: str) -> Optional[ForecastResult]:
        """Get the most recent snapshot for a label."""
        forecasts = self.list_forecasts(label)

        if not forecasts:
            return None

        return self.load_forecast(label, forecasts[0]["id"])

    def delete_forecast(self, label: str, forecast_id: str) -> bool:
        """
        Delete a forecast snapshot.

        Returns:
            True if deleted, False if not found
        """
        file_path = self.forecasts_dir / self._safe_label(label) / f"{forecast_id}.json"

        if file_path.exists():
            file_path.unlink()
            logger.info(f"Deleted forecast: {label}/{forecast_id}")
            return True

        return False

    @staticmethod
    def _safe_label(label: str) -> str:
        """Directory-safe form of a label."""
        safe = re.sub(r'[^a-z0-9]+', '_', label.lower()).strip('_')
        return safe or "forecast"
