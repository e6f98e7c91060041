import io
import qrcode
from qrcode.image.pil import PilImage

from qrbatch.core.config import Settings, settings as default_settings


class QRRenderer:
    """
    Renders one token to a PNG. The token text is encoded as-is,
    no JSON envelope, so any scanner shows the literal value.
    """
    def __init__(self, box_size: int = 10, border: int = 4):
        self.box_size = box_size
        self.border = border

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> "QRRenderer":
        cfg = cfg or default_settings
        return cls(box_size=cfg.qr_box_size, border=cfg.qr_border)

    def make_image(self, token: str) -> PilImage:
        qr = qrcode.QRCode(
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=self.box_size,
            border=self.border,
            image_factory=PilImage,
        )
        qr.add_data(token)
        qr.make(fit=True)
        return qr.make_image(fill_color="black", back_color="white")

    def render_png(self, token: str) -> bytes:
        buf = io.BytesIO()
        self.make_image(token).save(buf, format="PNG")
        return buf.getvalue()
