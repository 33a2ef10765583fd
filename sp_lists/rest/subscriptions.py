from dataclasses import dataclass
from typing import Any, Optional

from .queryable import QueryableCollection, QueryableInstance, then

JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class SubscriptionAddResult:
    data: Any
    subscription: "Subscription"


@dataclass(frozen=True)
class SubscriptionUpdateResult:
    data: Any
    subscription: "Subscription"


class Subscriptions(QueryableCollection):
    """Webhook subscriptions of a list."""

    def __init__(self, base_url, path: str = "subscriptions", **kwargs):
        super().__init__(base_url, path, **kwargs)

    def get_by_id(self, subscription_id: str) -> "Subscription":
        return Subscription(self).concat(f"('{subscription_id}')")

    def add(self, notification_url: str, expiration_date: str, client_state: Optional[str] = None):
        body = {
            "expirationDateTime": expiration_date,
            "notificationUrl": notification_url,
            "resource": self.to_url(),
        }
        if client_state:
            body["clientState"] = client_state
        return then(self.post(body=body, headers=JSON_HEADERS),
                    lambda data: SubscriptionAddResult(data=data, subscription=self.get_by_id(data["id"])))


class Subscription(QueryableInstance):

    def update(self, expiration_date: str):
        body = {"expirationDateTime": expiration_date}
        return then(self.patch(body=body, headers=JSON_HEADERS),
                    lambda data: SubscriptionUpdateResult(data=data, subscription=self))

    def delete(self) -> None:
        return then(self._request('DELETE'), lambda _: None)
