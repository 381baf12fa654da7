"""Prompts (Brazilian Portuguese) and reply parsing."""

import json
import re

from volta.contrib.ai.analysis import CustomerAnalysis
from volta.contrib.ai.content import BusinessContext

INSIGHTS_SYSTEM = (
    "Você é um especialista em marketing de fidelidade para restaurantes brasileiros. "
    "Responda sempre em português brasileiro com insights acionáveis e específicos."
)

CAMPAIGN_SYSTEM = (
    "Você é um especialista em marketing digital para restaurantes brasileiros. "
    "Crie campanhas engajantes e autênticas."
)

MAX_INSIGHTS = 4

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def insights_prompt(context: BusinessContext, analysis: CustomerAnalysis) -> str:
    counts = analysis.counts()
    return f"""
Analise os dados abaixo e forneça insights acionáveis em português brasileiro.

Contexto do Negócio:
- Nome: {context.business_name}
- Tipo: {context.business_type}
- Tom da marca: {context.ai_tone}
- Voz da marca: {context.brand_voice or "Não definido"}
- Total de clientes: {context.total_customers}
- Cartões ativos: {context.total_cards}

Atividade Recente:
- Selos dados esta semana: {context.stamps_this_week}
- Novos clientes esta semana: {context.new_customers_this_week}
- Cartões completados esta semana: {context.completed_cards_this_week}

Análise de Clientes:
- Clientes inativos (15+ dias): {counts["inactive"]}
- Clientes frequentes (5+ visitas/mês): {counts["frequent"]}
- Clientes com cartões próximos do complete: {counts["near_completion"]}
- Novos clientes (últimos 7 dias): {counts["new"]}
- Clientes VIP potenciais: {counts["vip_potential"]}

Para cada insight relevante (máximo {MAX_INSIGHTS}), retorne um item de um array JSON com:
{{
  "type": "inactive_customers|frequent_visitors|completed_cards|new_customers|vip_potential",
  "title": "Título curto e impactante",
  "description": "Descrição detalhada do insight",
  "count": numero_de_clientes_afetados,
  "recommended_action": "Ação recomendada específica",
  "expected_impact": "Impacto esperado (ex: 'Aumento de 25% nas visitas')",
  "priority": "high|medium|low",
  "campaign_suggestion": {{
    "title": "Nome da campanha",
    "message": "Mensagem WhatsApp sugerida (max 160 chars, tom {context.ai_tone})",
    "target_audience": "Público-alvo",
    "expected_engagement": "Taxa de engajamento esperada",
    "estimated_revenue": "Receita estimada"
  }}
}}

Foque em insights que geram ROI mensurável. Use linguagem brasileira natural e seja específico nos números e recomendações.
"""


def campaign_prompt(context: BusinessContext, campaign_type: str, target_audience: str) -> str:
    return f"""
Crie uma campanha de WhatsApp para {context.business_name} ({context.business_type}).

Tipo de campanha: {campaign_type}
Público-alvo: {target_audience}
Tom da marca: {context.ai_tone}
Voz da marca: {context.brand_voice or "Casual e acolhedor"}

Crie uma mensagem de WhatsApp que:
- Seja autêntica e no tom da marca
- Tenha máximo 160 caracteres
- Inclua um call-to-action claro
- Use emojis apropriados
- Seja específica para o contexto brasileiro

Retorne JSON com:
{{
  "title": "Nome da campanha",
  "message": "Mensagem do WhatsApp",
  "image_prompt": "Descrição para geração de imagem (opcional)",
  "expected_results": "Resultados esperados da campanha"
}}
"""


def extract_json(reply: str, array: bool = False):
    """
    Parse the first JSON array (or object) embedded in a model reply.

    Falls back to parsing the whole reply.

    Raises:
        ValueError: If no JSON can be parsed
    """
    match = (_JSON_ARRAY if array else _JSON_OBJECT).search(reply or "")
    text = match.group(0) if match else (reply or "")
    return json.loads(text)
