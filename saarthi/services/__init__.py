"""
Services layer - the complaint triage & lifecycle engine.

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- One owned Report Store instance, shared through services.engine
- Cross-component coupling only through the event bus
- Collaborator failures degrade to fallback data, never to errors
"""
