"""Prompt templates for every studio feature.

These builders are deterministic and side-effect free: each maps typed inputs
to a PromptSpec (instruction text, ordered parts, temperature and, for the
structured features, a response schema). Nothing here talks to the network.

Required-input checks live here too, so a MissingInputError is raised before
any call can be attempted.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from google.genai import types
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from backend.core.errors import MissingInputError
from backend.features.ai.schemas import (
    ACTION_PLAN_SCHEMA,
    ANALYSIS_SCHEMA,
    CAPTIONS_SCHEMA,
    REMIX_SCHEMA,
    VIDEO_SEGMENTS_SCHEMA,
)
from backend.features.catalog.constants import NO_DIALOGUE, SEGMENT_SECONDS
from backend.features.catalog.service import goal_name, language_name, platform_name, supports_segments
from backend.models.generation import (
    InitialAnalysis,
    MediaInput,
    OutputFormat,
    RemixGoal,
    VideoPromptOptions,
    VideoSegment,
    VideoType,
)

Part = Union[str, MediaInput]


class ParseFailurePolicy(str, Enum):
    """What the adapter does when a structured reply is not valid JSON."""

    FAIL = "fail"
    RAW_TEXT = "raw_text"


@dataclass(frozen=True)
class PromptSpec:
    name: str
    parts: Tuple[Part, ...]
    system_instruction: Optional[str] = None
    temperature: Optional[float] = None
    response_schema: Optional[types.Schema] = None
    parse_policy: ParseFailurePolicy = ParseFailurePolicy.FAIL

    @property
    def structured(self) -> bool:
        return self.response_schema is not None

    @property
    def text_parts(self) -> Tuple[str, ...]:
        return tuple(p for p in self.parts if isinstance(p, str))

    @property
    def media_parts(self) -> Tuple[MediaInput, ...]:
        return tuple(p for p in self.parts if isinstance(p, MediaInput))


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

def build_text_prompt(topic: str, target_ai: str) -> PromptSpec:
    if _blank(topic):
        raise MissingInputError("Por favor, descreva o assunto ou tema.")
    system_instruction = f"""Você é um engenheiro de prompts especialista em IAs generativas. Sua tarefa é criar um prompt detalhado e eficaz para um usuário iniciante, especificamente para a IA chamada "{target_ai}".
O usuário fornecerá um tópico simples. Você deve expandir esse tópico em um prompt rico e estruturado, otimizado para as melhores práticas e sintaxe da IA "{target_ai}".
O prompt deve incluir, quando aplicável para "{target_ai}":
1.  **Persona/Papel:** Defina o papel que a IA deve assumir.
2.  **Tarefa:** Descreva claramente a tarefa.
3.  **Contexto:** Forneça o contexto necessário.
4.  **Formato de Saída:** Especifique o formato desejado.
5.  **Tom e Estilo:** Indique o tom de voz.
6.  **Parâmetros Específicos:** Se "{target_ai}" usa parâmetros especiais (como --ar para Midjourney), inclua-os.

O prompt final deve ser apenas o prompt gerado, pronto para ser copiado e colado, sem nenhuma explicação ou texto adicional."""
    return PromptSpec(
        name="text",
        parts=(f'Tópico do usuário: "{topic}"',),
        system_instruction=system_instruction,
        temperature=0.8,
    )


# ---------------------------------------------------------------------------
# Image
# ---------------------------------------------------------------------------

def build_image_prompt(image: Optional[MediaInput], instruction: str, target_ai: str) -> PromptSpec:
    """Describe an uploaded image, or expand a text idea when no image is given."""
    instruction = instruction or ""
    if image is not None:
        if instruction.strip():
            instruction_text = (
                f'**Modificação Importante:** Além de descrever a imagem, o prompt final DEVE incorporar a seguinte '
                f'instrução do usuário: "{instruction}". O prompt gerado deve ser uma fusão da descrição da imagem '
                f"com esta modificação."
            )
        else:
            instruction_text = "O objetivo é criar um prompt para recriar uma imagem semelhante."
        text = f"""Analise esta imagem em detalhes extremos. Crie um prompt descritivo e poderoso para a IA de geração de imagem chamada "{target_ai}".

{instruction_text}

O prompt final deve ser uma única string de texto, otimizada para a sintaxe e as palavras-chave que funcionam melhor com "{target_ai}". Descreva, usando o formato preferido por esta IA:
- **Assunto principal:** O que ou quem está na imagem.
- **Composição e Ângulo:** Disposição dos elementos e perspectiva da câmera.
- **Estilo de arte:** (ex: fotorrealista, pintura a óleo, anime, arte digital, aquarela).
- **Iluminação:** (ex: luz do dia suave, iluminação cinematográfica, neon, hora dourada).
- **Paleta de cores:** Cores dominantes e clima.
- **Detalhes específicos:** Texturas, reflexos, emoções.
- **Parâmetros:** Inclua parâmetros específicos de "{target_ai}" se aplicável (ex: --ar 16:9, --v 6.0 para Midjourney).

O resultado deve ser apenas o prompt, sem nenhuma explicação ou texto adicional."""
        return PromptSpec(name="image", parts=(image, text))

    if not instruction.strip():
        raise MissingInputError("Por favor, forneça uma descrição para a imagem.")
    text = f"""Você é um engenheiro de prompts especialista em IAs de geração de imagem (como Midjourney, DALL-E, Stable Diffusion).
Sua tarefa é criar um prompt visualmente rico e detalhado para a IA "{target_ai}", baseado APENAS na seguinte ideia do usuário: "{instruction}".

O prompt deve ser otimizado para "{target_ai}" e descrever vividamente:
- **Assunto:** O que deve aparecer na imagem.
- **Estilo:** O estilo artístico (ex: foto realista, 3D, ilustração).
- **Ambiente/Iluminação:** Detalhes da cena.
- **Parâmetros:** Sintaxe específica da IA (se houver).

O resultado deve ser APENAS o prompt final, pronto para copiar e colar."""
    return PromptSpec(name="image", parts=(text,))


IMAGE_EDIT_INSTRUCTION = """Você é um engenheiro de prompts especialista em IAs de edição de imagem (inpainting/outpainting) como Adobe Firefly e Playground AI.
Sua tarefa é analisar a imagem base e a instrução simples do usuário para criar um prompt de texto detalhado e universal que outra IA possa usar para executar a edição.
O prompt deve primeiro descrever os elementos essenciais da imagem original (assunto, estilo, iluminação) e depois declarar claramente a modificação solicitada.
Exemplo de saída: "foto de um homem com óculos amarelos, iluminação de estúdio, adicione um chapéu de pirata preto na cabeça dele".
O resultado deve ser apenas o prompt de texto, sem nenhuma explicação."""


def build_image_edit_prompt(image: Optional[MediaInput], instruction: str) -> PromptSpec:
    if image is None:
        raise MissingInputError("Por favor, envie a imagem que deseja editar.")
    if _blank(instruction):
        raise MissingInputError("Por favor, descreva a edição que deseja fazer.")
    return PromptSpec(
        name="image-edit",
        parts=(image, f'Instrução do usuário: "{instruction}"'),
        system_instruction=IMAGE_EDIT_INSTRUCTION,
        temperature=0.7,
    )


# ---------------------------------------------------------------------------
# Video
# ---------------------------------------------------------------------------

_SEGMENT_NUMBER = re.compile(r"(\d+)\.")

_segments_adapter = TypeAdapter(List[VideoSegment])


def parse_segments(text: Optional[str]) -> Optional[List[VideoSegment]]:
    """Read a structured video reply; None when it is not a segment array."""
    text = (text or "").strip()
    if not text.startswith("["):
        return None
    try:
        return _segments_adapter.validate_json(text)
    except PydanticValidationError:
        return None


def last_segment_number(existing: Optional[str]) -> int:
    """Highest segment number already generated, 0 when none can be found.

    A structured reply is read by its "segmento" keys; anything else is
    scanned for the last "N." marker of a numbered list.
    """
    text = (existing or "").strip()
    if not text:
        return 0
    segments = parse_segments(text)
    if segments:
        return max(segment.segment for segment in segments)
    matches = _SEGMENT_NUMBER.findall(text)
    return int(matches[-1]) if matches else 0


def next_segment_number(existing: Optional[str]) -> int:
    return last_segment_number(existing) + 1


def _language_instruction(dialogue_language: str) -> str:
    if dialogue_language == NO_DIALOGUE:
        return "A cena é puramente visual, sem diálogos ou narração."
    name = language_name(dialogue_language)
    return (
        f"A cena deve incluir diálogo ou narração no idioma: **{name}**. No prompt gerado, integre o texto "
        f"falado de forma clara, por exemplo: '...enquanto uma narração em {name} diz: \"[texto aqui]\"'."
    )


def _influencer_instruction(influencer_prompt: Optional[str]) -> str:
    if _blank(influencer_prompt):
        return "O personagem principal pode ser criado livremente com base na ideia da cena."
    return (
        "O personagem principal da cena é um influenciador digital específico, definido pelo seguinte "
        f'"Character Sheet":\n---\n{influencer_prompt}\n---\n'
        "Garanta que a descrição do personagem no prompt final seja consistente com esta ficha."
    )


def _background_instruction(background: Optional[MediaInput]) -> str:
    if background is None:
        return "O cenário da cena pode ser criado livremente com base na ideia da cena."
    return (
        "A imagem de cenário fornecida é a referência principal para o ambiente. Analise-a e use sua atmosfera, "
        "estilo, iluminação e elementos como base para o ambiente da cena."
    )


def _commercial_instruction(video_type: VideoType, logo: Optional[MediaInput]) -> str:
    if video_type != VideoType.COMMERCIAL:
        return ""
    if logo is not None:
        return (
            "**BRIEFING DE COMERCIAL:** Esta é uma peça publicitária. A logomarca fornecida deve ser integrada de "
            "forma proeminente e fiel. Analise a logo em detalhe extremo (cores exatas, formas, tipografia) e "
            "descreva-a no prompt para que apareça de forma natural, mas clara, na cena (ex: em um outdoor, em um "
            "produto, em uma camiseta)."
        )
    return (
        "**BRIEFING DE COMERCIAL:** Esta é uma peça publicitária. O tom deve ser profissional e focado em "
        "destacar um produto ou serviço implícito na ideia do usuário."
    )


def _on_screen_text_instruction(enabled: bool) -> str:
    if enabled:
        return (
            "Inclua também sugestões de texto na tela (on-screen text) que sejam curtos, dinâmicos e complementem "
            "a narração ou a ação, como é comum em vídeos para redes sociais."
        )
    return "O vídeo deve ser puramente visual, sem nenhum texto na tela (on-screen text)."


def _segment_format_instruction(output_format: OutputFormat) -> str:
    if output_format == OutputFormat.STRUCTURED:
        return (
            "O resultado DEVE ser um array JSON válido. Cada objeto no array representa um segmento de 8 segundos "
            'e deve conter as chaves "segmento" (number) e "prompt" (string).'
        )
    return "O resultado DEVE ser uma lista numerada, onde cada item é o prompt para um segmento de 8 segundos."


def uses_segments(target_ai: str, options: VideoPromptOptions) -> bool:
    """Only a segmenting model gets the multi-segment or continuation template."""
    return supports_segments(target_ai) and (options.duration > SEGMENT_SECONDS or options.is_continuation)


def build_video_prompt(idea: str, target_ai: str, options: Optional[VideoPromptOptions] = None) -> PromptSpec:
    if _blank(idea):
        raise MissingInputError("Por favor, descreva a cena do vídeo.")
    options = options or VideoPromptOptions()

    context = "\n".join(
        line
        for line in (
            _influencer_instruction(options.influencer_prompt),
            _language_instruction(options.dialogue_language),
            _background_instruction(options.background_image),
            _commercial_instruction(options.video_type, options.logo),
            _on_screen_text_instruction(options.on_screen_text),
        )
        if line
    )
    segments = options.duration // SEGMENT_SECONDS
    segmented = uses_segments(target_ai, options)

    if segmented and options.is_continuation:
        start = next_segment_number(options.existing_prompts)
        system_instruction = f"""Você é um Supervisor de Continuidade e Mestre Roteirista para cinema. Sua tarefa é continuar uma história a partir de prompts existentes.
**Ideia Original:** "{idea}"
**Prompts Existentes:**
{options.existing_prompts}
---
**Sua Missão:** Crie os próximos {segments} segmentos de 8 segundos, começando a numeração a partir de {start}. Mantenha a consistência de personagem, tom e narrativa. A transição do último prompt existente para o seu primeiro novo prompt deve ser perfeita.
{context}
{_segment_format_instruction(options.output_format)}
Não inclua nenhuma explicação ou texto adicional, apenas os novos segmentos."""
    elif segmented:
        system_instruction = f"""Você é um roteirista multilíngue e diretor de cinema de elite, especialista em IAs de vídeo. Sua tarefa é criar uma sequência de prompts para a IA "{target_ai}" para gerar um vídeo de {options.duration} segundos.
A ideia da cena do usuário é: "{idea}".
{context}
Você deve dividir a cena em {segments} segmentos de 8 segundos. Cada prompt deve continuar de onde o anterior parou, criando uma cena fluida e contínua.
Para cada segmento, descreva vividamente a ação, o movimento da câmera, a iluminação, o estilo, o personagem (consistente com a ficha) E o diálogo/narração (se aplicável), garantindo que a transição para o próximo segmento seja natural.
{_segment_format_instruction(options.output_format)}
Não inclua nenhuma explicação ou texto adicional, apenas o resultado no formato solicitado."""
    else:
        system_instruction = f"""Você é um diretor de cinema e engenheiro de prompts de elite, especialista em IAs de vídeo como Google VEO, Sora e Runway. Sua tarefa é transformar uma ideia simples de um usuário em um prompt cinematográfico rico e detalhado, otimizado para a IA de vídeo "{target_ai}".
A ideia da cena é: "{idea}".
{context}
O prompt deve ser uma descrição vívida e evocativa. Inclua detalhes sobre:
1.  **Cena e Assunto:** Descreva o ambiente (baseado na imagem de referência, se fornecida) e o personagem principal (consistente com a ficha, se fornecida).
2.  **Ação e Diálogo/Narração:** O que está acontecendo e o que está sendo dito (se aplicável).
3.  **Cinematografia:** Especifique o tipo de plano, ângulo e movimento da câmera.
4.  **Iluminação:** Descreva a luz.
5.  **Estilo Visual e Humor:** Defina o estilo e o humor.
6.  **Duração e Parâmetros:** Se a IA for "Google VEO" ou "Flow VEO", especifique que o vídeo deve ter 8 segundos. Adapte a sintaxe para outras IAs.
O resultado final deve ser APENAS o prompt, pronto para uso, sem explicações adicionais."""

    parts: list = [f'Ideia do usuário: "{idea}"']
    if options.background_image is not None:
        parts.append(options.background_image)
    if options.logo is not None:
        parts.append(options.logo)

    structured = segmented and options.output_format == OutputFormat.STRUCTURED
    return PromptSpec(
        name="video-continuation" if segmented and options.is_continuation else "video",
        parts=tuple(parts),
        system_instruction=system_instruction,
        temperature=0.9,
        response_schema=VIDEO_SEGMENTS_SCHEMA if structured else None,
        parse_policy=ParseFailurePolicy.RAW_TEXT,
    )


# ---------------------------------------------------------------------------
# Captions
# ---------------------------------------------------------------------------

def build_captions_prompt(video_idea: str, platform: str) -> PromptSpec:
    if _blank(video_idea):
        raise MissingInputError("Por favor, descreva a ideia do vídeo para gerar as legendas.")
    name = platform_name(platform)
    system_instruction = f"""Você é um estrategista de conteúdo viral de classe mundial, com especialização profunda em algoritmos e comportamento de usuário da plataforma **{name}**.
Sua missão é criar um pacote de publicação completo para um vídeo baseado na seguinte ideia: "{video_idea}".

Sua resposta DEVE ser um array JSON. O array deve conter 3 objetos, cada um representando uma variação de legenda otimizada para **{name}**.

Cada objeto no array deve ter a seguinte estrutura:
- "variacao" (number): O número da variação (1, 2, ou 3).
- "gancho" (string): Uma primeira frase curta e impactante, usando técnicas de "anzol" para prender a atenção nos primeiros 2 segundos, seguindo as melhores práticas de {name}.
- "desenvolvimento" (string): O corpo da legenda, que cria um "gargalo" de curiosidade, usando storytelling e técnicas de "copy cat" para manter o usuário engajado.
- "cta" (string): Uma chamada para ação (Call to Action) clara e eficaz, otimizada para o tipo de engajamento que o algoritmo de {name} mais valoriza (ex: comentários, compartilhamentos, salvamentos).
- "hashtags" (string): Uma string única contendo as 10 melhores hashtags, pesquisadas e otimizadas para máxima visibilidade e alcance no nicho do vídeo dentro de {name}. Inclua hashtags de cauda longa e de tendência. As hashtags devem ser separadas por espaços e começar com '#'."""
    return PromptSpec(
        name="captions",
        parts=(f'Gere 3 variações de legenda para a ideia de vídeo: "{video_idea}", otimizadas para {name}',),
        system_instruction=system_instruction,
        temperature=0.8,
        response_schema=CAPTIONS_SCHEMA,
    )


# ---------------------------------------------------------------------------
# Influencer character sheet
# ---------------------------------------------------------------------------

INFLUENCER_INSTRUCTION = """Você é um "Character Designer" de elite para IAs generativas. Sua tarefa é criar um "Character Sheet" (ficha de personagem) extremamente detalhado e reutilizável. O resultado deve ser um único parágrafo denso de palavras-chave e frases curtas, separadas por vírgulas, robusto o suficiente para garantir a consistência do personagem em diferentes cenas e prompts.

O "Character Sheet" deve definir imutavelmente:
- **Rosto e Expressão:** Estrutura facial, formato e cor dos olhos, nariz, boca, expressão padrão.
- **Cabelo:** Cor, estilo, comprimento e textura.
- **Corpo:** Tipo físico, altura aproximada.
- **Estilo de Vestimenta:** Guarda-roupa principal (ex: cyberpunk com jaquetas de neon, streetwear minimalista, fantasia élfica).
- **Detalhes Únicos:** Tatuagens, cicatrizes, acessórios recorrentes (ex: óculos, piercings, colares).

Se uma imagem for fornecida, sua análise dela é a prioridade máxima. Se apenas texto for fornecido, baseie-se nele. O prompt final deve ser uma obra-prima de concisão e densidade de informação, pronto para ser copiado e colado. Não adicione nenhuma explicação, apenas o "Character Sheet"."""

# Description used when a sheet is derived from a reference image alone
FROM_IMAGE_DESCRIPTION = "Crie um Character Sheet detalhado baseado na imagem deste personagem."


def build_influencer_prompt(description: str, image: Optional[MediaInput] = None) -> PromptSpec:
    if _blank(description):
        if image is None:
            raise MissingInputError("Por favor, descreva o influenciador ou envie uma imagem de referência.")
        description = FROM_IMAGE_DESCRIPTION
    parts: list = [f'Instrução do usuário: "{description}"']
    if image is not None:
        parts.append(image)
    return PromptSpec(
        name="influencer",
        parts=tuple(parts),
        system_instruction=INFLUENCER_INSTRUCTION,
        temperature=0.7,
    )


# ---------------------------------------------------------------------------
# Remix
# ---------------------------------------------------------------------------

REMIX_GOAL_INSTRUCTIONS = {
    RemixGoal.VIEWS: (
        "Otimize o roteiro para MÁXIMA VISUALIZAÇÃO. Use um gancho extremamente rápido, crie um loop de "
        "curiosidade e termine de forma abrupta para incentivar replays."
    ),
    RemixGoal.INTERACTION: (
        "Otimize o roteiro para MÁXIMA INTERAÇÃO. Faça perguntas diretas, crie polêmica construtiva e inclua "
        "um CTA claro para comentários."
    ),
    RemixGoal.FOLLOWERS: (
        "Otimize o roteiro para GANHAR SEGUIDORES. Mostre a personalidade única do influenciador, crie uma "
        "conexão emocional e termine com um CTA forte para seguir."
    ),
}


def build_remix_prompt(video: Optional[MediaInput], influencer_prompt: str, goal: RemixGoal) -> PromptSpec:
    if video is None:
        raise MissingInputError("Por favor, envie o vídeo que deseja remixar.")
    goal = RemixGoal(goal)
    system_instruction = f"""Você é um Diretor de Conteúdo Viral e especialista em remixes para TikTok e Instagram Reels. Sua missão é analisar um vídeo de referência e criar um roteiro de 'Remix' para um influenciador digital específico.

Você receberá:
1. O vídeo para remixar (com até 30 segundos).
2. O 'Character Sheet' do influenciador que fará o remix.
3. O objetivo principal do remix.

Sua tarefa:
- Analise o vídeo frame a frame para entender o conteúdo, o ritmo e os momentos-chave.
- Crie uma narração/diálogo para o influenciador que seja relevante, espirituosa e consistente com sua personalidade (definida no Character Sheet).
- Crie instruções claras sobre COMO fazer o remix (ex: "Layout: Lado a Lado (Side-by-Side)", "Reação: Aponte para o objeto na tela aos 5 segundos", "Use o efeito 'Green Screen' com o vídeo original ao fundo").
- {REMIX_GOAL_INSTRUCTIONS[goal]}

Sua resposta DEVE ser um objeto JSON com a seguinte estrutura: {{ "roteiro_narracao": "...", "instrucoes_remix": "..." }}. Não inclua nenhuma explicação ou texto adicional."""
    return PromptSpec(
        name="remix",
        parts=(
            video,
            f"Character Sheet do Influenciador:\n{influencer_prompt or ''}\n\nObjetivo do Remix: {goal.value}",
        ),
        system_instruction=system_instruction,
        temperature=0.85,
        response_schema=REMIX_SCHEMA,
    )


# ---------------------------------------------------------------------------
# Profile analysis (two stages)
# ---------------------------------------------------------------------------

def build_analysis_prompt(
    platform: str, username: str, goal: str, screenshots: Sequence[MediaInput]
) -> PromptSpec:
    if _blank(username):
        raise MissingInputError("Por favor, informe o nome de usuário do perfil.")
    if not screenshots:
        raise MissingInputError("Por favor, envie ao menos um print do perfil.")
    name = platform_name(platform)
    goal_label = goal_name(goal)
    handle = username.strip().lstrip("@")
    system_instruction = f"""Você é um consultor de marketing digital de elite, conhecido por sua honestidade "brutalmente necessária". Sua tarefa é analisar os screenshots do perfil de um usuário e fornecer um diagnóstico direto e sem rodeios.

**Contexto do Perfil:**
- **Plataforma:** {name}
- **Nome de usuário:** @{handle}
- **Objetivo Principal:** {goal_label}

**Sua Análise:**
Analise os screenshots fornecidos. Seja direto, use uma linguagem forte e aponte as falhas de forma que "doam", mas que sejam para o bem do usuário.

**Formato de Saída Obrigatório:**
Sua resposta DEVE ser um objeto JSON com a seguinte estrutura:
- "prova_de_analise" (string): Uma frase curta citando algo ESPECÍFICO que você leu na imagem (ex: "Vi que sua bio diz 'X'..." ou "No seu último post sobre 'Y'..."). Isso é crucial para provar que você analisou o perfil.
- "pontos_fortes" (array de strings): 2-3 pontos que o perfil acerta, baseado nas imagens.
- "pontos_a_melhorar" (array de strings): 2-3 pontos fracos ou erros comuns que você observa, de forma direta e incisiva."""
    return PromptSpec(
        name="analysis",
        parts=(*screenshots, f"Analise este perfil para a plataforma {name} com o objetivo de {goal_label}."),
        system_instruction=system_instruction,
        temperature=0.85,
        response_schema=ANALYSIS_SCHEMA,
    )


def build_action_plan_prompt(analysis: InitialAnalysis, goal: str, platform: str) -> PromptSpec:
    name = platform_name(platform)
    system_instruction = f"""Você é um "Growth Hacker" e estrategista de conteúdo. Você recebeu um diagnóstico de um perfil e agora precisa criar um plano de ação para atingir o objetivo do usuário.

**Diagnóstico Recebido:**
- **Pontos Fortes:** {', '.join(analysis.strengths)}
- **Pontos a Melhorar:** {', '.join(analysis.weaknesses)}
- **Objetivo Principal:** {goal_name(goal)}

**Sua Missão:**
Crie um plano de ação concreto e passo a passo e uma ideia de conteúdo viral que resolva os "pontos a melhorar" e capitalize os "pontos fortes" para atingir o objetivo.

**Formato de Saída Obrigatório:**
Sua resposta DEVE ser um objeto JSON com a seguinte estrutura:
- "plano_de_acao" (array de objetos): Uma lista de 3-4 passos acionáveis. Cada objeto deve ter "passo" (number) e "acao" (string).
- "sugestao_de_conteudo_viral" (objeto): Uma ideia de post viral.
  - "ideia" (string): O conceito central do post.
  - "formato" (string): O melhor formato para esta ideia em {name}.
  - "roteiro_sugerido" (string): Um breve roteiro ou passo a passo para criar o conteúdo."""
    return PromptSpec(
        name="action-plan",
        parts=(f"Crie um plano de ação para este perfil no {name}.",),
        system_instruction=system_instruction,
        temperature=0.9,
        response_schema=ACTION_PLAN_SCHEMA,
    )
