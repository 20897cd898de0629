"""NOAA active-alerts client."""

import logging

from nimbus.ingest.noaa_client import NoaaClient, require
from nimbus.models.common import Coordinate
from nimbus.models.forecast import Alert

logger = logging.getLogger(__name__)


class AlertsClient:
    def __init__(self, noaa_client: NoaaClient):
        self.noaa = noaa_client

    async def get_active_alerts(self, coord: Coordinate) -> list[Alert]:
        url = f"{self.noaa.base_url}/alerts/active?point={coord.query_text()}"
        data = await self.noaa.get_json(url)
        alerts = []
        for feature in require(data, "features"):
            props = require(feature, "properties")
            alerts.append(
                Alert(
                    id=require(feature, "id"),
                    event=require(props, "event"),
                    headline=props.get("headline"),
                    severity=props.get("severity"),
                    urgency=props.get("urgency"),
                    area_desc=props.get("areaDesc"),
                    description=props.get("description"),
                    instruction=props.get("instruction"),
                    effective=props.get("effective"),
                    sent=props.get("sent"),
                )
            )
        logger.info("%d active alerts for %s", len(alerts), coord.query_text())
        return alerts
