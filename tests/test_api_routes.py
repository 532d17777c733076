# tests/test_api_routes.py
import io
import json
import os
import asyncio
import tempfile
import unittest
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy.pool import NullPool

from wardrobe_project.db.database import make_engine, make_session_factory
from config.settings import settings
from wardrobe_project import main
from wardrobe_project.main import app
from wardrobe_project.db.database import get_db
from wardrobe_project.db.schema_sync import init_db
from wardrobe_project.services import image_ai_service, clothing_analysis_service, analytics_service
from wardrobe_project.models.tryon_models import AIGenerationResult, ClothingAnalysisResult, ClothingTags

API = settings.API_V1_STR

COMPOSE_REQUEST = {
    "baseImage": "data:image/jpeg;base64,UEhPVE8=",
    "clothingImages": [
        {"imageUri": "file:///tee.jpg", "category": "Top", "position": "upper_body", "name": "Tee"},
    ],
    "prompt": "Weekend look",
}


class APITestCase(unittest.TestCase):
    """Runs the app against a throwaway SQLite file. The lifespan is skipped; the schema is created here."""

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        db_path = os.path.join(self.tmp_dir.name, "test.db")
        self.engine = make_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
        session_factory = make_session_factory(self.engine)
        asyncio.run(init_db(self.engine, session_factory=session_factory))

        async def override_get_db():
            async with session_factory() as session:
                yield session

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        asyncio.run(self.engine.dispose())
        self.tmp_dir.cleanup()


class TestImageProxyRoutes(APITestCase):

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "OK")
        self.assertIn("image-composition", body["services"])

    def test_clothing_positions(self):
        response = self.client.get("/api/clothing-positions")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIn("upper_body", body["positions"])
        self.assertIn("supportedFormats", body)
        self.assertIn("recommendedSize", body)

    def test_compose_validation_errors(self):
        cases = [
            ({**COMPOSE_REQUEST, "baseImage": None}, "Missing user photo (baseImage)."),
            ({**COMPOSE_REQUEST, "clothingImages": []}, "Missing clothing images (clothingImages)."),
            ({**COMPOSE_REQUEST, "prompt": ""}, "Missing composition prompt (prompt)."),
            (
                {**COMPOSE_REQUEST, "clothingImages": [COMPOSE_REQUEST["clothingImages"][0], {"imageUri": "x.jpg"}]},
                "Clothing image 2 is missing required fields (imageUri, category, position).",
            ),
        ]
        for payload, error in cases:
            with self.subTest(error=error):
                response = self.client.post("/api/compose-image", json=payload)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"success": False, "error": error})

    def test_compose_image(self):
        compose = AsyncMock(return_value=AIGenerationResult(success=True, image_url="data:image/png;base64,T0s="))
        with patch.object(image_ai_service, "compose_try_on_image", new=compose):
            response = self.client.post("/api/compose-image", json={**COMPOSE_REQUEST, "width": 640})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["imageUrl"], "data:image/png;base64,T0s=")
        base_image, clothing_images, prompt, options = compose.await_args.args
        self.assertEqual(base_image, "UEhPVE8=")
        self.assertEqual(clothing_images[0].position, "upper_body")
        self.assertEqual(prompt, "Weekend look")
        self.assertEqual(options.width, 640)
        self.assertEqual(options.height, settings.TRYON_DEFAULT_HEIGHT)

    def test_analyze_clothing(self):
        self.assertEqual(self.client.post("/api/analyze-clothing", json={}).status_code, 400)

        ok = AsyncMock(return_value=ClothingAnalysisResult(success=True, analysis=ClothingTags(colors=["red"])))
        with patch.object(clothing_analysis_service, "analyze_clothing_image", new=ok):
            response = self.client.post("/api/analyze-clothing", json={"imageBase64": "QUJD", "category": "Top"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["analysis"]["colors"], ["red"])

        failed = AsyncMock(return_value=ClothingAnalysisResult(success=False, error="quota exceeded"))
        with patch.object(clothing_analysis_service, "analyze_clothing_image", new=failed):
            response = self.client.post("/api/analyze-clothing", json={"imageBase64": "QUJD"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "error": "quota exceeded"})


class TestWardrobeFlow(APITestCase):

    def _create_user(self, name="Me"):
        response = self.client.post(f"{API}/users/", json={"name": name})
        self.assertEqual(response.status_code, 201)
        return response.json()

    def _create_item(self, name, category):
        response = self.client.post(f"{API}/wardrobe/", json={"name": name, "category": category})
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_default_categories_are_seeded(self):
        response = self.client.get(f"{API}/categories/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]["name"], "Top")

    def test_outfit_lifecycle(self):
        user = self._create_user()
        self.assertTrue(user["is_default"])
        tee = self._create_item("Tee", "Top")
        jeans = self._create_item("Jeans", "Pants")
        self.assertEqual(tee["category_name"], "Top")

        response = self.client.post(f"{API}/outfits/", json={
            "name": "Weekend", "user_id": user["id"], "clothing_ids": [jeans["id"], tee["id"]]
        })
        self.assertEqual(response.status_code, 201)
        outfit = response.json()
        self.assertEqual(outfit["user_name"], "Me")

        detail = self.client.get(f"{API}/outfits/{outfit['id']}").json()
        self.assertEqual([item["name"] for item in detail["items"]], ["Jeans", "Tee"])

        response = self.client.post(f"{API}/outfits/{outfit['id']}/wear", json={"weather": "18°C Cloudy"})
        self.assertEqual(response.status_code, 201)

        history = self.client.get(f"{API}/history", params={"user_id": user["id"]}).json()
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["weather"], "18°C Cloudy")

        wardrobe = self.client.get(f"{API}/wardrobe/").json()
        self.assertEqual({item["wear_count"] for item in wardrobe}, {1})

        stats = self.client.get(f"{API}/statistics/").json()
        self.assertEqual(stats["total_clothes"], 2)
        self.assertEqual(stats["total_outfits"], 1)
        self.assertEqual(stats["activity_stats"], {"active": 2, "inactive": 0})

        self.assertEqual(self.client.delete(f"{API}/outfits/{outfit['id']}").status_code, 204)
        self.assertEqual(self.client.get(f"{API}/outfits/{outfit['id']}").status_code, 404)

    def test_outfit_with_unknown_item(self):
        user = self._create_user()
        response = self.client.post(f"{API}/outfits/", json={
            "name": "Broken", "user_id": user["id"], "clothing_ids": ["7f8c2d3e-0000-4000-8000-000000000000"]
        })
        self.assertEqual(response.status_code, 400)

    def test_clothing_item_requires_category(self):
        response = self.client.post(f"{API}/wardrobe/", json={"name": "Mystery"})
        self.assertEqual(response.status_code, 400)

    def test_recommendation_and_save(self):
        user = self._create_user()
        tee = self._create_item("Tee", "Top")

        response = self.client.post(f"{API}/recommendations/", json={
            "user_id": user["id"], "weather": {"temperature": 20, "condition": "Sunny"}
        })
        self.assertEqual(response.status_code, 200)
        recommendation = response.json()
        self.assertEqual([item["id"] for item in recommendation["outfit"]], [tee["id"]])

        response = self.client.post(f"{API}/recommendations/save", json={
            "user_id": user["id"],
            "clothing_ids": [tee["id"]],
            "reason": recommendation["reason"],
            "weather": recommendation["weather"],
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["weather"], "20°C Sunny")
        self.assertTrue(response.json()["name"].endswith("recommended outfit"))

    def test_recommendation_without_wardrobe(self):
        user = self._create_user()
        response = self.client.post(f"{API}/recommendations/", json={
            "user_id": user["id"], "weather": {"temperature": 20, "condition": "Sunny"}
        })
        self.assertEqual(response.status_code, 400)

    def test_weather_without_location(self):
        response = self.client.get(f"{API}/weather")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["source"], "default")

    def test_shopping_toggle(self):
        item = self.client.post(f"{API}/shopping/", json={"name": "Belt", "category": "Accessory"}).json()
        toggled = self.client.post(f"{API}/shopping/{item['id']}/toggle").json()
        self.assertTrue(toggled["is_completed"])
        self.assertEqual(self.client.get(f"{API}/shopping/", params={"is_completed": True}).json()[0]["name"], "Belt")

    def test_user_photo_upload(self):
        user = self._create_user()
        buf = io.BytesIO()
        Image.new("RGB", (30, 60), (120, 120, 120)).save(buf, format="PNG")
        with tempfile.TemporaryDirectory() as media_dir, patch.object(settings, "MEDIA_DIR", media_dir):
            response = self.client.post(
                f"{API}/users/{user['id']}/photo", files={"file": ("me.png", buf.getvalue(), "image/png")}
            )
            self.assertEqual(response.status_code, 200)
            self.assertTrue(response.json()["photo_uri"].startswith(media_dir))

    def test_try_on_without_user_photo(self):
        user = self._create_user()
        tee = self._create_item("Tee", "Top")
        outfit = self.client.post(f"{API}/outfits/", json={"name": "Solo", "clothing_ids": [tee["id"]]}).json()

        response = self.client.post(f"{API}/outfits/{outfit['id']}/try-on", json={"user_id": user["id"]})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["success"], False)
        self.assertEqual(response.json()["error"], "A user photo is required for virtual try-on.")


class TestErrorHandling(APITestCase):

    def test_unhandled_error_returns_json(self):
        client = TestClient(app, raise_server_exceptions=False)
        with patch.object(analytics_service, "get_wardrobe_statistics", new=AsyncMock(side_effect=RuntimeError("db gone"))), \
             patch.object(settings, "DEBUG", False):
            response = client.get(f"{API}/statistics/")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"success": False, "error": "Internal server error"})

    def test_request_body_limit(self):
        with patch.object(main, "MAX_REQUEST_BODY_BYTES", 16):
            response = self.client.post("/api/compose-image", json=COMPOSE_REQUEST)
        self.assertEqual(response.status_code, 413)
        self.assertFalse(response.json()["success"])

    def test_request_body_limit_chunked(self):
        body = (chunk for chunk in [b"x" * 50, b"y" * 50])
        with patch.object(main, "MAX_REQUEST_BODY_BYTES", 16):
            response = self.client.post("/api/compose-image", content=body)
        self.assertEqual(response.status_code, 413)
        self.assertFalse(response.json()["success"])

    def test_small_chunked_body_reaches_route(self):
        payload = json.dumps({"name": "Chunked"}).encode()
        body = (payload[i:i + 8] for i in range(0, len(payload), 8))
        response = self.client.post(f"{API}/users/", content=body, headers={"Content-Type": "application/json"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["name"], "Chunked")


if __name__ == '__main__':
    unittest.main()
