# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/payload_normalizer.py

Normalización del body crudo de un callback IPN (form-encoded, NO confiable).

Produce dos vistas del mismo callback:
- echo_fields: campos tal cual llegaron (sólo form-decoding). Son los que se
  devuelven a PayPal: cualquier alteración rompería la verificación.
- payload: campos saneados (texto plano, sin markup, sin escapes de
  transporte). Es lo único que se persiste y se entrega a los listeners.

Charset: PayPal declara la codificación del body en el campo 'charset'
(windows-1252 por defecto en la cuenta, UTF-8 si el vendedor lo cambia).
El form-decoding usa ese charset con errors="surrogateescape": los bytes
que no decodifican se conservan y el echo-back los vuelve a emitir
idénticos. Las funciones de codificación aceptan el mismo charset.

No hay renombrado ni validación de esquema: los campos desconocidos pasan
sin cambios para seguir siendo compatibles con campos nuevos de PayPal.

Todas las funciones son puras.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import codecs
import logging
import re
import unicodedata
from typing import Dict, Mapping, Optional
from urllib.parse import parse_qsl, quote_plus, unquote_plus

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTES DEL PROTOCOLO
# =============================================================================

# Campo de control exigido por PayPal para el echo-back
VALIDATE_FIELD = "cmd"
VALIDATE_COMMAND = "_notify-validate"

# Campo con la correlación opaca del llamador (por convención: user id local)
CUSTOM_FIELD = "custom"

# Campo donde PayPal declara la codificación del body
CHARSET_FIELD = "charset"
DEFAULT_CHARSET = "utf-8"

# Conserva bytes no decodificables para re-emitirlos en el echo-back
_ECHO_ERRORS = "surrogateescape"

# Sólo sirven charsets que codifican los delimitadores del form como ASCII
_FORM_DELIMITERS = "a=b&c+d%"

# BIGINT firmado: 18 dígitos caben siempre
_USER_ID_RE = re.compile(r"[0-9]{1,18}")

_SCRIPT_STYLE_RE = re.compile(
    r"<(script|style)[^>]*?>.*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)
_TAG_RE = re.compile(r"</?[a-zA-Z!?][^>]*>?")
_BACKSLASH_RE = re.compile(r"\\(.?)", re.DOTALL)
_WHITESPACE_RE = re.compile(r"[\r\n\t ]+")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")

# Control (Cc) y surrogates sueltos de bytes no decodificables (Cs)
_STRIPPED_CATEGORIES = ("Cc", "Cs")


class NormalizedCallback(BaseModel):
    """Callback IPN normalizado (efímero: vive sólo durante un handshake)."""

    model_config = ConfigDict(frozen=True)

    echo_fields: Dict[str, str] = Field(
        default_factory=dict,
        description="Campos tal cual se recibieron (para el echo-back)",
    )
    payload: Dict[str, str] = Field(
        default_factory=dict,
        description="Campos saneados (CallbackPayload)",
    )
    charset: str = Field(
        default=DEFAULT_CHARSET,
        description="Codificación declarada por PayPal (normalizada)",
    )


# =============================================================================
# CHARSET
# =============================================================================

def resolve_charset(declared: Optional[str]) -> str:
    """
    Normaliza el nombre de charset declarado por PayPal.

    Ausente, desconocido o no compatible con ASCII (p.ej. UTF-16) =>
    DEFAULT_CHARSET.
    """
    declared = (declared or "").strip()
    if not declared:
        return DEFAULT_CHARSET
    try:
        name = codecs.lookup(declared).name
        compatible = _FORM_DELIMITERS.encode(name) == _FORM_DELIMITERS.encode("ascii")
    except (LookupError, UnicodeError):
        compatible = False
    if not compatible:
        logger.info(f"IPN: charset no soportado {declared[:40]!r}, se usa {DEFAULT_CHARSET}")
        return DEFAULT_CHARSET
    return name


def form_charset(fields: Mapping[str, str]) -> str:
    """Charset de un conjunto de campos ya decodificados."""
    return resolve_charset(fields.get(CHARSET_FIELD))


def detect_body_charset(raw_body: bytes | str) -> str:
    """Lee el campo 'charset' del body crudo sin decodificar el resto."""
    if isinstance(raw_body, bytes):
        text = raw_body.decode("latin-1")
    else:
        text = raw_body
    declared = None
    for key, value in parse_qsl(text, keep_blank_values=True, encoding="latin-1"):
        if key == CHARSET_FIELD:
            declared = value
    return resolve_charset(declared)


def _decode_body(raw_body: bytes | str, charset: str) -> str:
    if isinstance(raw_body, bytes):
        return raw_body.decode(charset, errors=_ECHO_ERRORS)
    return raw_body


def to_wire_bytes(text: str, charset: str) -> bytes:
    """Texto del echo-back -> bytes, restaurando los bytes conservados."""
    return text.encode(charset, errors=_ECHO_ERRORS)


def quote_form_value(value: str, charset: str) -> str:
    return quote_plus(value, encoding=charset, errors=_ECHO_ERRORS)


def encode_form_fields(fields: Mapping[str, str], charset: Optional[str] = None) -> str:
    """
    Codifica campos como application/x-www-form-urlencoded con el charset
    del callback (o el declarado en los propios campos).
    """
    charset = charset or form_charset(fields)
    return "&".join(
        f"{quote_form_value(key, charset)}={quote_form_value(value, charset)}"
        for key, value in fields.items()
    )


# =============================================================================
# FORM-DECODING Y SANEAMIENTO
# =============================================================================

def parse_form_body(raw_body: bytes | str, charset: Optional[str] = None) -> Dict[str, str]:
    """
    Decodifica un body application/x-www-form-urlencoded.

    Conserva valores vacíos; si una clave se repite gana la última
    ocurrencia (misma semántica que el servidor web original). Sin charset
    explícito se usa el declarado en el propio body.
    """
    charset = charset or detect_body_charset(raw_body)
    text = _decode_body(raw_body, charset)
    return dict(
        parse_qsl(text, keep_blank_values=True, encoding=charset, errors=_ECHO_ERRORS)
    )


def strip_slashes(value: str) -> str:
    """Quita el escape con backslash introducido por la capa de transporte."""
    return _BACKSLASH_RE.sub(r"\1", value)


def sanitize_text_field(value: str) -> str:
    """
    Sanea un valor recibido y lo restringe a texto plano de una línea.

    Pasos:
    1. Quita escapes con backslash
    2. Elimina bloques <script>/<style> completos y cualquier tag
    3. Escapa '<' sueltos
    4. Elimina caracteres de control y bytes no decodificables; colapsa
       espacios/saltos/tabs
    5. Elimina octetos percent-encoded residuales
    6. Recorta extremos
    """
    filtered = strip_slashes(value)
    filtered = _SCRIPT_STYLE_RE.sub("", filtered)
    filtered = _TAG_RE.sub("", filtered)
    filtered = filtered.replace("<", "&lt;")

    filtered = "".join(
        " " if ch in "\r\n\t" else ch
        for ch in filtered
        if ch in "\r\n\t" or unicodedata.category(ch) not in _STRIPPED_CATEGORIES
    )
    filtered = _WHITESPACE_RE.sub(" ", filtered)

    found_octet = False
    while _OCTET_RE.search(filtered):
        filtered = _OCTET_RE.sub("", filtered)
        found_octet = True
    if found_octet:
        filtered = _WHITESPACE_RE.sub(" ", filtered)

    return filtered.strip()


def _drop_undecodable(key: str) -> str:
    return "".join(ch for ch in key if unicodedata.category(ch) != "Cs")


def sanitize_payload(fields: Mapping[str, str]) -> Dict[str, str]:
    """
    Aplica sanitize_text_field a cada valor. Las claves no se tocan salvo
    para quitar bytes no decodificables.
    """
    return {_drop_undecodable(key): sanitize_text_field(value) for key, value in fields.items()}


def normalize_callback_payload(raw_body: bytes | str) -> NormalizedCallback:
    """
    Convierte el body crudo del callback en un NormalizedCallback.

    Args:
        raw_body: Body del request tal cual se recibió

    Returns:
        NormalizedCallback con echo_fields, payload saneado y charset
    """
    charset = detect_body_charset(raw_body)
    echo_fields = parse_form_body(raw_body, charset)
    payload = sanitize_payload(echo_fields)

    logger.debug(f"IPN normalizado: {len(payload)} campos (charset={charset})")

    return NormalizedCallback(echo_fields=echo_fields, payload=payload, charset=charset)


# =============================================================================
# RECONSTRUCCIÓN MANUAL (TRANSPORTE DE BAJO NIVEL)
# =============================================================================

def split_raw_body(raw_body: bytes | str, charset: Optional[str] = None) -> Dict[str, str]:
    """
    Reconstruye los campos partiendo el body a mano en '&' y luego en '='.

    No depende de que el framework haya parseado el body. Sólo sobreviven
    pares con exactamente dos partes; el valor se URL-decodifica y la clave
    se conserva tal cual llegó.
    """
    charset = charset or detect_body_charset(raw_body)
    fields: Dict[str, str] = {}
    for keyval in _decode_body(raw_body, charset).split("&"):
        parts = keyval.split("=")
        if len(parts) == 2:
            fields[parts[0]] = unquote_plus(parts[1], encoding=charset, errors=_ECHO_ERRORS)
    return fields


def encode_validation_body(fields: Mapping[str, str], charset: Optional[str] = None) -> str:
    """
    Arma el body del echo-back: 'cmd=_notify-validate' seguido de cada
    campo con su valor URL-encodificado en el charset del callback.
    """
    charset = charset or form_charset(fields)
    encoded = f"{VALIDATE_FIELD}={VALIDATE_COMMAND}"
    for key, value in fields.items():
        encoded += f"&{key}={quote_form_value(value, charset)}"
    return encoded


# =============================================================================
# CORRELACIÓN DE USUARIO
# =============================================================================

def resolve_user_id(payload: Mapping[str, str]) -> int:
    """
    Obtiene el user id local desde el campo 'custom'.

    IMPORTANTE: 'custom' es una convención del llamador original, no una
    garantía del protocolo. Es un dato NO autenticado; sólo sirve como
    correlación. Valores ausentes o no numéricos se mapean a 0.
    """
    custom = (payload.get(CUSTOM_FIELD) or "").strip()
    if not custom:
        return 0
    if _USER_ID_RE.fullmatch(custom) is None:
        logger.info(f"IPN: campo custom no numérico, se usa user_id=0 (custom={custom[:40]!r})")
        return 0
    return int(custom)


__all__ = [
    "VALIDATE_FIELD",
    "VALIDATE_COMMAND",
    "CUSTOM_FIELD",
    "CHARSET_FIELD",
    "DEFAULT_CHARSET",
    "NormalizedCallback",
    "resolve_charset",
    "form_charset",
    "detect_body_charset",
    "to_wire_bytes",
    "quote_form_value",
    "encode_form_fields",
    "parse_form_body",
    "strip_slashes",
    "sanitize_text_field",
    "sanitize_payload",
    "normalize_callback_payload",
    "split_raw_body",
    "encode_validation_body",
    "resolve_user_id",
]

# Fin del archivo ipn_listener/modules/ipn/services/payload_normalizer.py
