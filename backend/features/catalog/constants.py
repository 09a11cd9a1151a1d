"""Static catalog: target models, languages, platforms, durations and goals."""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class AIModel:
    id: str
    name: str
    type: str  # tab the model belongs to
    description: str
    url: str
    # Only models that chain 8 second segments accept longer durations
    supports_segments: bool = False


AI_MODELS: List[AIModel] = [
    # Text
    AIModel("geral-texto", "Geral / Padrão", "text",
            "Um prompt de texto bem estruturado que funciona na maioria das IAs.",
            "https://gemini.google.com/"),
    AIModel("ChatGPT (GPT-4)", "ChatGPT (GPT-4)", "text",
            "Otimizado para conversas complexas, raciocínio e geração de texto.",
            "https://chat.openai.com/"),
    AIModel("Google Gemini", "Google Gemini", "text",
            "Poderoso em tarefas multimodais e geração de texto criativo.",
            "https://gemini.google.com/"),
    # Image
    AIModel("geral-imagem", "Geral / Padrão", "image",
            "Um prompt de imagem bem estruturado que funciona na maioria das IAs.",
            "https://www.bing.com/images/create"),
    AIModel("midjourney", "Midjourney", "image",
            "Focado em imagens artísticas e estilizadas de alta qualidade.",
            "https://www.midjourney.com/imagine"),
    AIModel("dall-e-3", "DALL-E 3", "image",
            "Excelente para criar imagens criativas e seguir instruções de texto com precisão.",
            "https://chat.openai.com/"),
    AIModel("google-imagen-3", "Google Imagen 3", "image",
            "Geração de imagens fotorrealistas e de alta qualidade da Google.",
            "https://aistudio.google.com/app/imagefx"),
    AIModel("nano-banana", "Nano Banana", "image",
            "IA especializada em geração de imagens criativas e detalhadas.",
            "https://nanobanana.com/"),
    AIModel("stable-diffusion", "Stable Diffusion", "image",
            "Altamente personalizável, ideal para quem gosta de experimentar com parâmetros.",
            "https://dreamstudio.ai/"),
    # Image edit
    AIModel("nano-banana-edit", "Nano Banana (Editar)", "image-edit",
            "Edita uma imagem existente com base em um prompt de texto.",
            "https://nanobanana.com/"),
    AIModel("adobe-firefly", "Adobe Firefly (Generative Fill)", "image-edit",
            "Poderosa ferramenta de edição e preenchimento generativo.",
            "https://firefly.adobe.com/"),
    AIModel("canva-magic-edit", "Canva (Magic Edit)", "image-edit",
            "Edição de imagem intuitiva e integrada ao ecossistema Canva.",
            "https://www.canva.com/magic-edit/"),
    AIModel("playground-ai", "Playground AI (Inpainting)", "image-edit",
            "Plataforma versátil com boas capacidades de edição.",
            "https://playground.com/"),
    AIModel("fotor-ai-editor", "Fotor (AI Image Editor)", "image-edit",
            "Editor de fotos online com várias ferramentas de IA.",
            "https://www.fotor.com/features/ai-image-editor"),
    # Video
    AIModel("Google VEO", "Google VEO", "video",
            "Gera vídeos de alta qualidade de 8 segundos com compreensão cinematográfica.",
            "https://deepmind.google/technologies/veo/"),
    AIModel("Flow VEO", "Flow VEO", "video",
            "Especializado em sequências de vídeo fluidas e contínuas de até 24s.",
            "https://deepmind.google/technologies/veo/",
            supports_segments=True),
    AIModel("Sora (OpenAI)", "Sora (OpenAI)", "video",
            "Conhecido por vídeos mais longos e realistas com narrativas complexas.",
            "https://openai.com/sora"),
    AIModel("Runway Gen-2", "Runway Gen-2", "video",
            "Plataforma versátil para gerar e editar vídeos com IA.",
            "https://runwayml.com/"),
    AIModel("Pika", "Pika", "video",
            "Focado em vídeos curtos e expressivos com um toque artístico.",
            "https://pika.art/"),
    AIModel("Stable Video Diffusion", "Stable Video Diffusion", "video",
            "Modelo de código aberto para gerar vídeos curtos a partir de texto ou imagens.",
            "https://stability.ai/stable-video"),
]

IDEA_SUGGESTIONS: List[str] = [
    "Futurista", "Mágico", "Minimalista", "Cyberpunk", "Vintage", "Sonho", "Aventura",
    "Misterioso", "Cômico", "Épico", "Subaquático", "Espacial", "Natureza", "Urbano",
    "Abstrato", "Fantasia", "Gótico", "Solarpunk", "Retrô", "Surreal",
]

NO_DIALOGUE = "sem-dialogo"

DIALOGUE_LANGUAGES = [
    {"id": NO_DIALOGUE, "name": "Sem Diálogo / Narração"},
    {"id": "pt-br", "name": "Português (Brasil)"},
    {"id": "en-us", "name": "Inglês (EUA)"},
    {"id": "es-es", "name": "Espanhol"},
    {"id": "fr-fr", "name": "Francês"},
    {"id": "de-de", "name": "Alemão"},
]

SOCIAL_MEDIA_PLATFORMS = [
    {"id": "tiktok", "name": "TikTok", "url": "https://www.tiktok.com/"},
    {"id": "instagram-reels", "name": "Instagram Reels", "url": "https://www.instagram.com/"},
    {"id": "youtube-shorts", "name": "YouTube Shorts", "url": "https://www.youtube.com/shorts/"},
    {"id": "x-twitter", "name": "X (Twitter)", "url": "https://x.com/"},
    {"id": "facebook-reels", "name": "Facebook Reels", "url": "https://www.facebook.com/"},
]

SEGMENT_SECONDS = 8

VIDEO_DURATIONS = [8, 16, 24, 32, 40, 48, 56]

ANALYSIS_GOALS = [
    {"id": "views", "name": "Aumentar Visualizações"},
    {"id": "interaction", "name": "Aumentar Engajamento"},
    {"id": "followers", "name": "Conseguir mais Seguidores"},
]
