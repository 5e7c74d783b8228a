import unittest

from rui.bridge import TextMetrics
from rui.canvas import BOTTOM_BASELINE, ROUND_CAP, CanvasView, FontParams, Path, font_text
from rui.data import parse_data_text

from tests.fakes import make_session

START = "{\nconst ctx = getCanvasContext('id000001');\nctx.clearRect(0, 0, 0, 0);"


class TestFontText(unittest.TestCase):

    def test_font_text(self):
        self.assertEqual(font_text("serif", "12px"), "12px serif")
        self.assertEqual(font_text("Open Sans, serif", "10px", FontParams(italic=True, weight=7)),
                         'italic bold 10px "Open Sans",serif')
        self.assertEqual(font_text("mono", "1em", FontParams(small_caps=True, weight=3)),
                         "small-caps 300 1rem mono")


class TestCanvasView(unittest.TestCase):

    def setUp(self):
        self.session = make_session({"canvasTextMetrics": "width=42, ascent=10, descent=3"})
        self.bridge = self.session.bridge
        self.drawing = None
        self.canvas = CanvasView(self.session, {"draw-function": self.draw})

    def draw(self, canvas):
        if self.drawing is not None:
            self.drawing(canvas)

    def redraw(self, drawing):
        self.drawing = drawing
        self.canvas.html()
        self.bridge.clear()
        self.canvas.redraw()
        self.assertEqual(len(self.bridge.scripts), 1)
        return self.bridge.scripts[0]

    def test_html(self):
        self.assertTrue(self.canvas.html().startswith('<canvas id="id000001" class="ruiView"'))
        self.assertTrue(self.canvas.html().endswith("></canvas>"))

    def test_not_drawn_before_rendering(self):
        self.canvas.redraw()
        self.assertEqual(self.bridge.scripts, [])

    def test_drawing_is_one_script(self):
        def drawing(canvas):
            canvas.set_solid_color_fill_style("#FF0000")
            canvas.fill_rect(1, 2, 3, 4)
            canvas.stroke_path(Path().move_to(0, 0).line_to(5, 5).close())
            canvas.fill_text(1, 2, "hi")

        self.assertEqual(self.redraw(drawing), START + (
            "\nctx.fillStyle = 'rgb(255,0,0)';"
            "\nctx.fillRect(1, 2, 3, 4);"
            "\nlet v1 = new Path2D();"
            "\nv1.moveTo(0, 0);"
            "\nv1.lineTo(5, 5);"
            "\nv1.closePath();"
            "\nctx.stroke(v1);"
            "\nctx.fillText('hi', 1, 2);"
            "\n}\n"
        ))

    def test_gradient(self):
        def drawing(canvas):
            canvas.set_linear_gradient_fill_style(0, 0, "#FF0000", 10, 0, "#0000FF",
                                                  [(0.5, "#00FF00"), (2, "#000000")])

        self.assertEqual(self.redraw(drawing), START + (
            "\nlet v1 = ctx.createLinearGradient(0, 0, 10, 0);"
            "\nv1.addColorStop(0, 'rgb(255,0,0)');"
            "\nv1.addColorStop(0.5, 'rgb(0,255,0)');"
            "\nv1.addColorStop(1, 'rgb(0,0,255)');"
            "\nctx.fillStyle = v1;"
            "\n}\n"
        ))

    def test_line_settings(self):
        def drawing(canvas):
            canvas.set_line_width(2)
            canvas.set_line_width(-1)
            canvas.set_line_cap(ROUND_CAP)
            canvas.set_line_dash([4, 2], 1)
            canvas.set_text_baseline(BOTTOM_BASELINE)
            canvas.set_text_align(99)

        self.assertEqual(self.redraw(drawing), START + (
            "\nctx.lineWidth = 2;"
            "\nctx.lineCap = 'round';"
            "\nctx.setLineDash([4,2]);"
            "\nctx.lineDashOffset = 1;"
            "\nctx.textBaseline = 'bottom';"
            "\n}\n"
        ))

    def test_images(self):
        def drawing(canvas):
            canvas.draw_image(1, 2, "cat.png")

        self.assertEqual(self.redraw(drawing), START + (
            "\nimg = images.get('cat.png');\nif (img) {\nctx.drawImage(img, 1, 2);\n}"
            "\n}\n"
        ))

        self.canvas.load_image("cat.png")
        self.assertEqual(self.bridge.scripts[-1], "loadImage('id000001', 'cat.png');")
        self.canvas.handle_command("imageLoaded", parse_data_text("imageLoaded{id=id000001, url=cat.png}"))
        self.assertTrue(self.bridge.scripts[-1].startswith(START))
        with self.assertLogs("rui.canvas", "ERROR"):
            self.canvas.handle_command("imageError", parse_data_text("imageError{id=id000001, url=dog.png}"))

    def test_text_metrics(self):
        def drawing(canvas):
            self.metrics = canvas.text_metrics("hi", "serif", "12px")

        self.canvas.html()
        self.drawing = drawing
        self.canvas.redraw()
        self.assertEqual(self.metrics, TextMetrics(width=42.0, ascent=10.0, descent=3.0))
        self.assertEqual(self.bridge.scripts[0], "canvasTextMetrics(1, 'id000001', '12px serif', 'hi');")

    def test_resize_redraws(self):
        self.canvas.html()
        self.session.process_message("resize{views=[_{id=id000001, width=100, height=50}]}")
        self.assertEqual(self.canvas.frame().width, 100.0)
        self.assertTrue(self.bridge.scripts[-1].startswith(
            "{\nconst ctx = getCanvasContext('id000001');\nctx.clearRect(0, 0, 100, 50);"))

    def test_invalid_draw_function(self):
        with self.assertLogs("rui.properties", "ERROR"):
            self.assertFalse(self.canvas.set("draw-function", "not callable"))
        self.assertEqual(self.canvas.get("draw-function"), self.draw)


if __name__ == "__main__":
    unittest.main()
