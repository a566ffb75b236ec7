GENERATION_SYSTEM = (
    "Eres un generador de frases sensibles para explorar recuerdos y emociones. "
    "Mantenlo sencillo y cálido."
)

GENERATE_QUESTIONS = """Genera {amount} preguntas en {language_name} que inviten a una persona a recordar momentos personales relacionados con el tema "{category}".
{focus}

Las preguntas deben:
- Ser claras y directas
- Estar formuladas como si alguien entrevistara con cariño a un familiar
- Evocar memorias específicas (lugares, personas, emociones)

No incluyas frases poéticas, reflexiones filosóficas ni metáforas.

Responde solamente con la lista de preguntas, una por línea."""

SUBCATEGORY_FOCUS = "En particular, enfócate en los siguientes temas: {subcategories}."

LANGUAGE_NAMES = {
    "es": "español",
    "en": "inglés",
}
