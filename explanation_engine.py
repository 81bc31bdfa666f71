import logging

from google import genai

from config import GEMINI_API_KEY, GEMINI_MODEL

logger = logging.getLogger(__name__)


def _format_distance(scored):
    if scored.distance_km is None:
        return "N/A"
    return f"{scored.distance_km:.1f} km"


def _format_hospital_lines(ranked):
    lines = []
    for index, scored in enumerate(ranked, start=1):
        hospital = scored.hospital
        lines.append(
            f"{index}. {hospital.id} - {hospital.city}, {hospital.state} | Rating: {hospital.rating} | "
            f"Specialisation: {hospital.specialisation} | Beds: {hospital.beds} | "
            f"Distance: {_format_distance(scored)} | Schemes: {hospital.insurance_schemes}"
        )
    return "\n".join(lines)


def _format_location(patient):
    lat = patient.get("lat")
    lon = patient.get("lon")
    if lat is None or lon is None:
        return "Not provided"
    return f"{lat:.4f}, {lon:.4f}"


def build_explanation_prompt(patient, ranked):
    income = "Below BPL" if patient.get("bplStatus") == "below" else "Above BPL"
    disability = "Yes" if patient.get("disabled") == "yes" else "No"

    return f"""
You are a medical referral assistant for India's public healthcare system.

Patient Profile:
- Name: {patient.get("name")}
- Age: {patient.get("age")}, Gender: {patient.get("gender")}
- Condition requiring referral: {patient.get("diseaseLabel")}
- Income: {income}
- Disability: {disability}
- Current Hospital: {patient.get("hospital")}
- Location: {_format_location(patient)}

Top Recommended Hospitals (ranked by AI scoring):
{_format_hospital_lines(ranked)}

Task:
1. In 2-3 sentences, explain WHY these specific hospitals were recommended for this patient.
2. Mention the most relevant hospital by name and its key strengths (specialisation, rating, proximity if applicable).
3. Note any relevant insurance schemes the patient may benefit from given their profile.
4. Keep tone professional, concise, and human-readable.

Do NOT use bullet points. Write in clear prose.
"""


def fallback_explanation(ranked, disease_label):
    """Explanation used when the AI service returns nothing."""
    if not ranked:
        return f"No catalog hospital could be recommended for {disease_label} cases."

    best = ranked[0].hospital
    return (
        f"{best.id} in {best.city} is recommended based on its rating of {best.rating} "
        f"and specialisation in {best.specialisation}, making it well-suited for {disease_label} cases."
    )


class GeminiExplainer:
    def __init__(self, api_key=None, model=None):
        self.api_key = api_key if api_key is not None else GEMINI_API_KEY
        self.model = model or GEMINI_MODEL
        self._client = None

    def _get_client(self):
        if not self.api_key:
            return None
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def explain(self, patient, ranked):
        """Ask Gemini why ``ranked`` suits ``patient``; None when unavailable."""
        client = self._get_client()
        if not client:
            logger.info("GEMINI_API_KEY not configured, skipping AI explanation")
            return None

        try:
            response = client.models.generate_content(
                model=self.model,
                contents=build_explanation_prompt(patient, ranked),
            )
        except Exception as exc:
            logger.warning("Gemini error: %s", exc)
            return None

        text = (response.text or "").strip()
        return text or None
