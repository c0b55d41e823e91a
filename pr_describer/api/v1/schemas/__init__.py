from pr_describer.api.v1.schemas.webhook import WebhookResponse

__all__ = ["WebhookResponse"]
