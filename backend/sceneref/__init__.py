"""SceneRef — resolves spoken object references against a 3D scene."""
