# =============================================================================
# Camera Vision Analyzer - Localized User Messages
# =============================================================================
# Status, overlay and remediation texts shown by the analyzer, keyed by
# message id, for every supported reply language.
# =============================================================================

from typing import Dict

_MESSAGES: Dict[str, Dict[str, str]] = {
    "es": {
        "idle": 'Presiona "start" para activar la camara.',
        "ready_title": "Listo para iniciar",
        "ready_text": "Activa la camara y acepta el permiso.",
        "requesting_permission": "Solicitando permiso de camara...",
        "unsupported_status": "Esta plataforma no soporta camara.",
        "unsupported_title": "Plataforma no compatible",
        "unsupported_text": "No hay acceso a camara disponible en este entorno.",
        "insecure_status": "Contexto no seguro: la camara requiere HTTPS (o localhost).",
        "insecure_title": "Se requiere HTTPS",
        "insecure_text": "Usa un origen HTTPS (o localhost). El acceso a camara no funciona sobre HTTP.",
        "embedded_warning": "Advertencia: estas en un iframe/preview. Puede bloquear permisos de camara.",
        "blocked_title": "Permiso de camara bloqueado",
        "camera_ready": "Camara lista.",
        "camera_stopped": "Camara detenida.",
        "stopped_title": "Camara detenida",
        "stopped_text": "Activa la camara para volver a iniciar.",
        "start_failed_title": "No se pudo iniciar la camara",
        "not_allowed": (
            "No se pudo acceder a la camara (permiso denegado).\n\n"
            "Causas tipicas:\n"
            "- Permiso denegado.\n"
            "- Entorno bloqueado (iframe/preview).\n"
            "- Sitio no seguro (no HTTPS)."
        ),
        "not_found": "No se encontro una camara disponible.\n- Verifica que el dispositivo tenga camara activa.",
        "not_readable": "La camara esta en uso por otra app.\n- Cerra otras apps que esten usando la camara.",
        "overconstrained": "No se pudo aplicar la configuracion solicitada.\n- Proba cambiar a la otra camara.",
        "unknown_error": "No se pudo abrir la camara.\n- Verifica HTTPS/permiso.",
        "howto_title": "Como habilitar la camara",
        "howto_intro": "Como habilitar la camara:",
        "howto_secure": "1) Asegurate de usar HTTPS (o localhost).",
        "howto_allow": '2) Cuando se pida permiso, elegi "Permitir".',
        "howto_denied": "3) Si lo negaste:",
        "howto_ios": "   - iPhone/iPad: Ajustes -> Safari -> Camara -> Permitir.",
        "howto_macos": "   - macOS: Ajustes del Sistema -> Privacidad y seguridad -> Camara.",
        "howto_linux": "   - Linux: verifica que tu usuario pertenezca al grupo 'video'.",
        "howto_windows": "   - Windows: Configuracion -> Privacidad -> Camara -> Permitir acceso.",
        "howto_other": "   - En el navegador: icono del candado -> Permisos -> Camara -> Permitir.",
        "howto_embedded": "4) Si estas en un preview/iframe: abri en una pestana normal.",
        "not_started": "Camara no iniciada.",
        "capture_failed": "Error al capturar la foto.",
        "busy": "Ya hay un analisis en curso.",
        "analyzing": "Analizando imagen con IA...",
        "analysis_ready": "Listo. Recomendaciones generadas.",
        "error": "Error: {error}",
        "connection_error": "Error de conexion: {error}",
        "no_recommendations": "No hay recomendaciones para leer.",
        "playing": "Reproduciendo audio...",
        "paused": "Audio en pausa.",
        "audio_finished": "Audio finalizado.",
        "audio_error": "Error en la reproduccion de audio.",
        "tts_unavailable": "Text-to-Speech no disponible.",
    },
    "en": {
        "idle": 'Type "start" to turn on the camera.',
        "ready_title": "Ready to start",
        "ready_text": "Turn on the camera and accept the permission prompt.",
        "requesting_permission": "Requesting camera permission...",
        "unsupported_status": "This platform does not support camera access.",
        "unsupported_title": "Unsupported platform",
        "unsupported_text": "No camera access is available in this environment.",
        "insecure_status": "Insecure context: the camera requires HTTPS (or localhost).",
        "insecure_title": "HTTPS required",
        "insecure_text": "Use an HTTPS (or localhost) origin. Camera access does not work over plain HTTP.",
        "embedded_warning": "Warning: running inside an iframe/preview. It may block camera permissions.",
        "blocked_title": "Camera permission blocked",
        "camera_ready": "Camera ready.",
        "camera_stopped": "Camera stopped.",
        "stopped_title": "Camera stopped",
        "stopped_text": "Turn on the camera to start again.",
        "start_failed_title": "Could not start the camera",
        "not_allowed": (
            "Could not access the camera (permission denied).\n\n"
            "Typical causes:\n"
            "- Permission denied.\n"
            "- Blocked environment (iframe/preview).\n"
            "- Insecure site (not HTTPS)."
        ),
        "not_found": "No camera was found.\n- Check that the device has a working camera.",
        "not_readable": "The camera is in use by another app.\n- Close other apps using the camera.",
        "overconstrained": "The requested settings could not be applied.\n- Try switching to the other camera.",
        "unknown_error": "Could not open the camera.\n- Check HTTPS/permission.",
        "howto_title": "How to enable the camera",
        "howto_intro": "How to enable the camera:",
        "howto_secure": "1) Make sure you are on HTTPS (or localhost).",
        "howto_allow": '2) When asked for permission, choose "Allow".',
        "howto_denied": "3) If you denied it:",
        "howto_ios": "   - iPhone/iPad: Settings -> Safari -> Camera -> Allow.",
        "howto_macos": "   - macOS: System Settings -> Privacy & Security -> Camera.",
        "howto_linux": "   - Linux: make sure your user belongs to the 'video' group.",
        "howto_windows": "   - Windows: Settings -> Privacy -> Camera -> Allow access.",
        "howto_other": "   - In the browser: padlock icon -> Permissions -> Camera -> Allow.",
        "howto_embedded": "4) If you are in a preview/iframe: open it in a regular tab.",
        "not_started": "Camera not started.",
        "capture_failed": "Could not capture the photo.",
        "busy": "An analysis is already in progress.",
        "analyzing": "Analyzing image with AI...",
        "analysis_ready": "Done. Recommendations generated.",
        "error": "Error: {error}",
        "connection_error": "Connection error: {error}",
        "no_recommendations": "There are no recommendations to read.",
        "playing": "Playing audio...",
        "paused": "Audio paused.",
        "audio_finished": "Audio finished.",
        "audio_error": "Audio playback error.",
        "tts_unavailable": "Text-to-Speech unavailable.",
    },
    "pt": {
        "idle": 'Digite "start" para ativar a camera.',
        "ready_title": "Pronto para iniciar",
        "ready_text": "Ative a camera e aceite a permissao.",
        "requesting_permission": "Solicitando permissao da camera...",
        "unsupported_status": "Esta plataforma nao suporta camera.",
        "unsupported_title": "Plataforma incompativel",
        "unsupported_text": "Nao ha acesso a camera disponivel neste ambiente.",
        "insecure_status": "Contexto inseguro: a camera exige HTTPS (ou localhost).",
        "insecure_title": "HTTPS necessario",
        "insecure_text": "Use uma origem HTTPS (ou localhost). O acesso a camera nao funciona em HTTP.",
        "embedded_warning": "Aviso: voce esta em um iframe/preview. Isso pode bloquear a permissao da camera.",
        "blocked_title": "Permissao da camera bloqueada",
        "camera_ready": "Camera pronta.",
        "camera_stopped": "Camera parada.",
        "stopped_title": "Camera parada",
        "stopped_text": "Ative a camera para iniciar novamente.",
        "start_failed_title": "Nao foi possivel iniciar a camera",
        "not_allowed": (
            "Nao foi possivel acessar a camera (permissao negada).\n\n"
            "Causas comuns:\n"
            "- Permissao negada.\n"
            "- Ambiente bloqueado (iframe/preview).\n"
            "- Site inseguro (sem HTTPS)."
        ),
        "not_found": "Nenhuma camera encontrada.\n- Verifique se o dispositivo tem uma camera ativa.",
        "not_readable": "A camera esta em uso por outro app.\n- Feche outros apps que usam a camera.",
        "overconstrained": "Nao foi possivel aplicar a configuracao pedida.\n- Tente trocar para a outra camera.",
        "unknown_error": "Nao foi possivel abrir a camera.\n- Verifique HTTPS/permissao.",
        "howto_title": "Como habilitar a camera",
        "howto_intro": "Como habilitar a camera:",
        "howto_secure": "1) Garanta que esta usando HTTPS (ou localhost).",
        "howto_allow": '2) Quando pedir permissao, escolha "Permitir".',
        "howto_denied": "3) Se voce negou:",
        "howto_ios": "   - iPhone/iPad: Ajustes -> Safari -> Camera -> Permitir.",
        "howto_macos": "   - macOS: Ajustes do Sistema -> Privacidade e Seguranca -> Camera.",
        "howto_linux": "   - Linux: verifique se seu usuario pertence ao grupo 'video'.",
        "howto_windows": "   - Windows: Configuracoes -> Privacidade -> Camera -> Permitir acesso.",
        "howto_other": "   - No navegador: icone do cadeado -> Permissoes -> Camera -> Permitir.",
        "howto_embedded": "4) Se estiver em um preview/iframe: abra em uma aba normal.",
        "not_started": "Camera nao iniciada.",
        "capture_failed": "Erro ao capturar a foto.",
        "busy": "Ja existe uma analise em andamento.",
        "analyzing": "Analisando imagem com IA...",
        "analysis_ready": "Pronto. Recomendacoes geradas.",
        "error": "Erro: {error}",
        "connection_error": "Erro de conexao: {error}",
        "no_recommendations": "Nao ha recomendacoes para ler.",
        "playing": "Reproduzindo audio...",
        "paused": "Audio pausado.",
        "audio_finished": "Audio finalizado.",
        "audio_error": "Erro na reproducao de audio.",
        "tts_unavailable": "Text-to-Speech indisponivel.",
    },
}

_HOWTO_FAMILIES = ("ios", "macos", "linux", "windows")


def get_messages(language: str) -> Dict[str, str]:
    """
    Return the message table for a language.

    Raises:
        ValueError: If the language has no message table.
    """
    try:
        return _MESSAGES[language]
    except KeyError:
        raise ValueError(f"No messages for language {language!r}") from None


def permission_how_to(language: str, platform_family: str) -> str:
    """
    Build the step-by-step camera permission guide.

    Args:
        language:        Message language.
        platform_family: "ios", "macos", "linux", "windows" or anything else
                         for the generic browser instructions.
    """
    messages = get_messages(language)
    family = platform_family if platform_family in _HOWTO_FAMILIES else "other"
    lines = [
        messages["howto_intro"],
        "",
        messages["howto_secure"],
        messages["howto_allow"],
        messages["howto_denied"],
        messages[f"howto_{family}"],
        messages["howto_embedded"],
    ]
    return "\n".join(lines)


def not_allowed_help(language: str, platform_family: str) -> str:
    """Permission-denied explanation followed by the how-to guide."""
    return get_messages(language)["not_allowed"] + "\n\n" + permission_how_to(language, platform_family)
