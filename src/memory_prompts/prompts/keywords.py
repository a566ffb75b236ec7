KEYWORD_SYSTEM = "Eres un extractor de palabras clave útiles para clasificación."

EXTRACT_KEYWORDS = """Extrae 3 a 5 palabras clave relevantes del siguiente enunciado.
Las palabras clave deben ser sustantivos o conceptos importantes.

Texto: "{text}"

Devuélvelas como un arreglo JSON de cadenas, por ejemplo: ["familia", "infancia", "casa"]

Responde solamente con el JSON, sin otro texto."""
