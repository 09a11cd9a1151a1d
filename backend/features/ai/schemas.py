"""Response schemas the generative service is asked to constrain its JSON to.

Field names are Portuguese because the instruction text names them that way;
backend.models.generation maps them to English attributes.
"""

from google.genai import types

_STRING = types.Schema(type=types.Type.STRING)
_INTEGER = types.Schema(type=types.Type.INTEGER)


def _object(properties: dict) -> types.Schema:
    return types.Schema(
        type=types.Type.OBJECT,
        properties=properties,
        required=list(properties),
    )


VIDEO_SEGMENTS_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=_object({"segmento": _INTEGER, "prompt": _STRING}),
)

CAPTIONS_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=_object(
        {
            "variacao": _INTEGER,
            "gancho": _STRING,
            "desenvolvimento": _STRING,
            "cta": _STRING,
            "hashtags": _STRING,
        }
    ),
)

REMIX_SCHEMA = _object({"roteiro_narracao": _STRING, "instrucoes_remix": _STRING})

ANALYSIS_SCHEMA = _object(
    {
        "prova_de_analise": _STRING,
        "pontos_fortes": types.Schema(type=types.Type.ARRAY, items=_STRING),
        "pontos_a_melhorar": types.Schema(type=types.Type.ARRAY, items=_STRING),
    }
)

ACTION_PLAN_SCHEMA = _object(
    {
        "plano_de_acao": types.Schema(
            type=types.Type.ARRAY,
            items=_object({"passo": _INTEGER, "acao": _STRING}),
        ),
        "sugestao_de_conteudo_viral": _object(
            {"ideia": _STRING, "formato": _STRING, "roteiro_sugerido": _STRING}
        ),
    }
)
