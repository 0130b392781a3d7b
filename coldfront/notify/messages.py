"""Fixed alert payloads."""

from coldfront.models.alerts import RecordAlert

COLD_FRONT_TITLE = "🍂🍁 Cold Front! 🍂🍁"
COLD_FRONT_BODY = "There's a cold front in the 5 day forecast! 🎉"
COLD_FRONT_FILE_NAME = "giphy.webp"
COLD_FRONT_FILE_TYPE = "image/webp"
COLD_FRONT_FILE_URL = "https://i.giphy.com/media/huJmPXfeir5JlpPAx0/giphy.webp"

RECORD_TITLE = "❄️ New Cold Record ❄️"


def record_body(alert: RecordAlert) -> str:
    return f"We're forecasted to get our first {alert.kind.value} below {alert.value}°!"
