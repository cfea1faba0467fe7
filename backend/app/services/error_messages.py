"""Localised messages for authentication errors."""

from __future__ import annotations

from app.config import settings

GENERIC_ERROR_PT_BR = "Ocorreu um erro. Por favor, tente novamente."

AUTH_ERRORS_PT_BR: dict[str, str] = {
    "Invalid login credentials": "Email ou senha incorretos",
    "Email not confirmed": "Email ainda não foi confirmado",
    "Invalid email or password": "Email ou senha inválidos",
    "User not found": "Usuário não encontrado",
    "Email already registered": "Este email já está cadastrado",
    "Password should be at least 6 characters": "A senha deve ter pelo menos 6 caracteres",
    "Rate limit exceeded": "Muitas tentativas. Aguarde um momento e tente novamente",
    "Network error": "Erro de conexão. Verifique sua internet",
    "User already registered": "Usuário já cadastrado",
    "Current password is incorrect": "A senha atual está incorreta",
    "New password should be different from the old password": (
        "A nova senha deve ser diferente da senha atual"
    ),
    "Password is too weak": (
        "A senha é muito fraca. Use uma combinação de letras, números e símbolos"
    ),
    "Token has expired or is invalid": "Sessão expirada. Por favor, faça login novamente",
    "Invalid token": "Token inválido. Por favor, faça login novamente",
    "Not authenticated": "Usuário não autenticado",
    "User not allowed": "Usuário não autorizado",
}


def translate_auth_error(message: str) -> str:
    """Map an English auth error onto its pt-BR text.

    Matching is a case-insensitive substring test, so provider messages with
    extra context still translate. Unknown messages get a generic text.
    """
    lowered = message.lower()
    for english, portuguese in AUTH_ERRORS_PT_BR.items():
        if english.lower() in lowered:
            return portuguese
    return GENERIC_ERROR_PT_BR


def auth_error_detail(message: str, locale: str | None = None) -> str:
    """Return ``message`` in the configured locale."""
    if (locale or settings.LOCALE) == "pt-BR":
        return translate_auth_error(message)
    return message
