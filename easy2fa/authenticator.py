from __future__ import annotations

from typing import Optional, Union

from . import otp, provisioning
from .config import Settings, load_settings
from .errors import InvalidArgument


class Authenticator:
    def __init__(self, secret: Optional[str] = None, step: Optional[int] = None,
                 digits: Optional[int] = None, *, clock: Optional[otp.Clock] = None,
                 random_bytes: Optional[otp.RandomSource] = None,
                 settings: Optional[Settings] = None):
        """
        Bind a secret to its TOTP step and code length.
        If no secret is given a new one is generated.
        Missing step/digits fall back to the EASY2FA_* settings.
        """
        self.settings = settings or load_settings()
        self.step     = self.settings.step if step is None else step
        self.digits   = self.settings.digits if digits is None else digits
        self.drift    = self.settings.drift
        self.clock    = clock
        if secret is None:
            self.secret = otp.generate_seed(self.settings.seed_length, random_bytes=random_bytes)
        elif not secret:
            raise InvalidArgument("secret must not be empty")
        else:
            self.secret = secret

    def get_time_counter(self) -> int:
        return otp.time_counter(self.step, clock=self.clock)

    def hotp(self, counter: int) -> int:
        return otp.generate_code(self.secret, counter, self.digits)

    def now(self) -> int:
        return self.hotp(self.get_time_counter())

    def now_text(self) -> str:
        return otp.format_code(self.now(), self.digits)

    def verify_hotp(self, code: Union[int, str], counter: int,
                    allowed_before_drift: int = 0, allowed_after_drift: int = 0) -> bool:
        return otp.verify_hotp(self.secret, code, counter, self.digits,
                               allowed_before_drift, allowed_after_drift)

    def verify(self, code: Union[int, str]) -> bool:
        """Verify a TOTP code, tolerating `drift` periods of skew either way."""
        return otp.verify_hotp(self.secret, code, self.get_time_counter(), self.digits,
                               self.drift, self.drift)

    def _issuer(self, issuer: Optional[str]) -> Optional[str]:
        return issuer if issuer is not None else self.settings.issuer

    def provisioning_uri(self, account: Optional[str] = None, issuer: Optional[str] = None) -> str:
        """Provisioning URI for authenticator apps."""
        return provisioning.generate_url(self.secret, self._issuer(issuer), account)

    def provisioning_uri_qr_code(self, account: Optional[str] = None, issuer: Optional[str] = None):
        return provisioning.render_qr_image(self.provisioning_uri(account, issuer))

    def qr_data_url(self, account: Optional[str] = None, issuer: Optional[str] = None) -> str:
        return provisioning.generate_qr_code(seed=self.secret, issuer=self._issuer(issuer),
                                             account=account)
