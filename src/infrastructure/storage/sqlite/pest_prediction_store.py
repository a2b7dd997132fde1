"""SQLite implementation of the pest/disease prediction feed."""

from src.config import get_logger
from src.core.entities.signals import PestPrediction
from src.core.interfaces.providers import IPestPredictionProvider
from src.infrastructure.storage.sqlite.connection import fetch_all

logger = get_logger(__name__)


class SQLitePestPredictionStore(IPestPredictionProvider):
    """Reads active predictions from pest_disease_predictions."""

    async def get_active_predictions(self, farm_id: int) -> list[PestPrediction]:
        """Active predictions for a farm, most probable first."""
        rows = await fetch_all(
            "get_active_predictions",
            """
            SELECT * FROM pest_disease_predictions
            WHERE farm_id = ? AND status = 'active'
            ORDER BY probability_score DESC, id ASC
            """,
            (farm_id,),
        )

        predictions = [
            PestPrediction(
                id=str(row["id"]),
                farm_id=row["farm_id"],
                pest_type=row["pest_disease_type"],
                risk_level=row["risk_level"],
                probability_score=row["probability_score"] or 0.0,
                predicted_onset_date=row["predicted_onset_date"],
            )
            for row in rows
        ]
        logger.debug("pest_predictions_loaded", farm_id=farm_id, count=len(predictions))
        return predictions
