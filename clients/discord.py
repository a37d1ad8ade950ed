"""Discord webhook wrapper."""

from discord_webhook import DiscordEmbed, DiscordWebhook

ESCALATION_COLOR = "e74c3c"


class DiscordWebhookClient:
    def __init__(self, webhook_url: str, role_id: str = ""):
        self.webhook_url = webhook_url
        self.role_id = role_id

    def send(self, message: str, fields: dict[str, str] | None = None, title: str | None = None):
        """Post ``message``, with ``fields`` rendered as one embed when given."""
        if self.role_id:
            content = f"<@&{self.role_id}> {message}"
            allowed_mentions = {"roles": [self.role_id]}
        else:
            content = message
            allowed_mentions = {"parse": []}

        webhook = DiscordWebhook(
            url=self.webhook_url,
            content=content,
            allowed_mentions=allowed_mentions,
        )
        if fields:
            embed = DiscordEmbed(title=title or "", color=ESCALATION_COLOR)
            for name, value in fields.items():
                # Discord rejects field values over 1024 characters
                embed.add_embed_field(name=name, value=value[:1024], inline=False)
            webhook.add_embed(embed)
        return webhook.execute()
