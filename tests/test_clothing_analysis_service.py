# tests/test_clothing_analysis_service.py
import io
import base64
import unittest
from types import SimpleNamespace
from unittest.mock import patch, MagicMock

from PIL import Image

from config.settings import settings
from wardrobe_project.services import clothing_analysis_service


def _image_base64() -> str:
    buf = io.BytesIO()
    Image.new("RGB", (16, 16), (0, 0, 255)).save(buf, format="JPEG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


class TestExtractJson(unittest.TestCase):

    def test_fenced_block(self):
        text = 'Here you go:\n```json\n{"colors": ["navy"]}\n```\nThanks'
        self.assertEqual(clothing_analysis_service.extract_json(text), {"colors": ["navy"]})

    def test_plain_json(self):
        self.assertEqual(clothing_analysis_service.extract_json('  {"gender": "male"} '), {"gender": "male"})

    def test_not_an_object(self):
        with self.assertRaises(ValueError):
            clothing_analysis_service.extract_json("[1, 2]")

    def test_not_json(self):
        with self.assertRaises(ValueError):
            clothing_analysis_service.extract_json("no idea what this is")


class TestValidateAndClean(unittest.TestCase):

    def test_empty_input_gets_defaults(self):
        tags = clothing_analysis_service.validate_and_clean({})
        self.assertEqual(tags.colors, [])
        self.assertEqual(tags.weather_conditions, ["Sunny"])
        self.assertEqual(tags.seasons, ["All"])
        self.assertEqual(tags.styles, ["Casual"])
        self.assertEqual(tags.occasions, ["Daily"])
        self.assertEqual(tags.age_groups, ["Young adult"])
        self.assertEqual(tags.body_types, ["Standard"])
        self.assertEqual((tags.temperature_range.min, tags.temperature_range.max), (0, 30))
        self.assertEqual(tags.formality_level, 2)
        self.assertEqual(tags.gender, "unisex")
        self.assertEqual(tags.confidence, 0.8)
        self.assertTrue(tags.ai_analyzed)

    def test_values_are_clamped(self):
        tags = clothing_analysis_service.validate_and_clean({
            "formalityLevel": 9,
            "confidence": 1.7,
            "temperatureRange": {"min": -5, "max": "warm"},
        })
        self.assertEqual(tags.formality_level, 5)
        self.assertEqual(tags.confidence, 1.0)
        self.assertEqual(tags.temperature_range.min, -5)
        self.assertEqual(tags.temperature_range.max, 30)

        low = clothing_analysis_service.validate_and_clean({"formalityLevel": 0.2, "confidence": -1})
        self.assertEqual(low.formality_level, 1)
        self.assertEqual(low.confidence, 0.0)

    def test_malformed_values_are_replaced(self):
        tags = clothing_analysis_service.validate_and_clean({
            "colors": "blue",
            "gender": "robot",
            "formalityLevel": True,
            "seasons": ["Winter"],
        })
        self.assertEqual(tags.colors, [])
        self.assertEqual(tags.gender, "unisex")
        self.assertEqual(tags.formality_level, 2)
        self.assertEqual(tags.seasons, ["Winter"])

    def test_default_tags(self):
        tags = clothing_analysis_service.default_tags()
        self.assertFalse(tags.ai_analyzed)
        self.assertEqual(tags.confidence, 0.5)
        self.assertIsNotNone(tags.analyzed_at)
        self.assertEqual(tags.model_dump(by_alias=True)["aiAnalyzed"], False)


class TestAnalyzeClothingImage(unittest.IsolatedAsyncioTestCase):

    async def test_without_api_key(self):
        with patch.object(settings, "GOOGLE_GEMINI_API_KEY", None):
            result = await clothing_analysis_service.analyze_clothing_image(_image_base64())
        self.assertFalse(result.success)
        self.assertIn("GOOGLE_GEMINI_API_KEY", result.error)

    async def test_successful_analysis(self):
        model = MagicMock()
        model.generate_content.return_value = SimpleNamespace(
            text='```json\n{"colors": ["blue"], "formalityLevel": 3, "gender": "female"}\n```'
        )
        with patch.object(settings, "GOOGLE_GEMINI_API_KEY", "test-key"), \
             patch.object(clothing_analysis_service.genai, "configure") as configure, \
             patch.object(clothing_analysis_service.genai, "GenerativeModel", return_value=model):
            result = await clothing_analysis_service.analyze_clothing_image(
                "data:image/jpeg;base64," + _image_base64(), category="Top", name="Blue shirt"
            )

        configure.assert_called_once_with(api_key="test-key")
        self.assertTrue(result.success)
        self.assertEqual(result.analysis.colors, ["blue"])
        self.assertEqual(result.analysis.formality_level, 3)
        self.assertEqual(result.analysis.gender, "female")
        self.assertIsNotNone(result.analysis.analyzed_at)

        prompt = model.generate_content.call_args.args[0][0]
        self.assertIn("Category: Top", prompt)
        self.assertIn("Name: Blue shirt", prompt)

    async def test_model_failure_is_reported(self):
        model = MagicMock()
        model.generate_content.side_effect = RuntimeError("quota exceeded")
        with patch.object(settings, "GOOGLE_GEMINI_API_KEY", "test-key"), \
             patch.object(clothing_analysis_service.genai, "configure"), \
             patch.object(clothing_analysis_service.genai, "GenerativeModel", return_value=model):
            result = await clothing_analysis_service.analyze_clothing_image(_image_base64())

        self.assertFalse(result.success)
        self.assertEqual(result.error, "quota exceeded")

    async def test_unreadable_reply(self):
        model = MagicMock()
        model.generate_content.return_value = SimpleNamespace(text="I cannot see any clothing.")
        with patch.object(settings, "GOOGLE_GEMINI_API_KEY", "test-key"), \
             patch.object(clothing_analysis_service.genai, "configure"), \
             patch.object(clothing_analysis_service.genai, "GenerativeModel", return_value=model):
            result = await clothing_analysis_service.analyze_clothing_image(_image_base64())

        self.assertFalse(result.success)


if __name__ == '__main__':
    unittest.main()
