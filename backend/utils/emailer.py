# backend/utils/emailer.py
# EmailJS REST sender used for the weekly report

import requests

EMAILJS_SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"


class EmailSendError(Exception):
    pass


class EmailJSSender:
    def __init__(self, service_id, template_id, public_key, private_key,
                 timeout=15, session=None):
        self.service_id = service_id
        self.template_id = template_id
        self.public_key = public_key
        self.private_key = private_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            service_id=config.get("EMAILJS_SERVICE_ID"),
            template_id=config.get("EMAILJS_TEMPLATE_ID"),
            public_key=config.get("EMAILJS_PUBLIC_KEY"),
            private_key=config.get("EMAILJS_PRIVATE_KEY"),
            timeout=config.get("EMAILJS_TIMEOUT_SEC", 15),
        )

    @property
    def configured(self) -> bool:
        return all([self.service_id, self.template_id, self.public_key, self.private_key])

    def missing_settings(self):
        """Names of the EmailJS settings that are not set (for the config error)."""
        fields = {
            "EMAILJS_SERVICE_ID": self.service_id,
            "EMAILJS_TEMPLATE_ID": self.template_id,
            "EMAILJS_PUBLIC_KEY": self.public_key,
            "EMAILJS_PRIVATE_KEY": self.private_key,
        }
        return [k for k, v in fields.items() if not v]

    def send(self, template_params: dict) -> str:
        """
        Send one templated email. Returns the provider's response text ("OK").
        Raises EmailSendError on transport errors and non-2xx responses.
        """
        payload = {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.public_key,
            "accessToken": self.private_key,
            "template_params": template_params,
        }
        try:
            resp = self.session.post(EMAILJS_SEND_URL, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise EmailSendError(f"{type(e).__name__}: {e}") from e
        if not resp.ok:
            raise EmailSendError(f"EmailJS {resp.status_code}: {(resp.text or '').strip()}")
        return resp.text
