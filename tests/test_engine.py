"""Tests for the layout engine: batches, seeding and configuration."""

import asyncio

import pytest
from PIL import Image, ImageDraw

from conftest import SCENARIO_B_TEXT, load_tags, solid_buffer
from tagcloud import TagCloud
from tagcloud.errors import ConfigurationError, NotReadyError, SilhouetteDecodeError
from tagcloud.layout.grid import OccupancyGrid
from tagcloud.options import BoundaryPolicy, CloudOptions
from tagcloud.parser.model import TagRequest
from tagcloud.parser.tags import parse_tags


def _silhouette_png(path, width=500, height=500, box=(0, 0, 249, 499)):
    """Transparent PNG with an opaque black rectangle."""
    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    ImageDraw.Draw(image).rectangle(box, fill=(0, 0, 0, 255))
    image.save(path)
    return path


def _last_cell(start, extent, cell_size):
    """Index of the last cell column (or row) covered by a mask box."""
    return start // cell_size + -(-extent // cell_size) - 1


class TestDraw:
    def test_results_in_input_order(self, make_cloud, language_tags):
        results = make_cloud().draw(language_tags)
        assert [r.text for r in results] == [t.text for t in language_tags]

    def test_font_sizes_follow_weights(self, make_cloud, language_tags):
        results = make_cloud().draw(language_tags)
        assert [r.font_size for r in results] == [100, 70, 55, 20, 10]

    def test_heaviest_tag_lands_centred(self, make_cloud, language_tags):
        results = make_cloud().draw(language_tags)
        python = results[0]
        assert (python.width, python.height) == (300, 100)
        assert python.position == (100, 200)

    def test_explicit_angle_and_color_carried(self, make_cloud, language_tags):
        results = make_cloud().draw(language_tags)
        assert results[3].angle == 90
        assert results[4].angle == 0
        assert results[4].color == "#ff0000"
        assert results[0].color is None

    def test_single_angle_step(self, make_cloud, language_tags):
        results = make_cloud(angle_count=1, angle_from=15).draw(language_tags)
        assert [r.angle for r in results] == [15, 15, 15, 90, 0]

    def test_scenario_sizes(self, make_cloud):
        results = make_cloud().draw(parse_tags(SCENARIO_B_TEXT))
        assert [r.font_size for r in results] == [10, 55, 100]

    def test_uniform_weights_get_midpoint(self, make_cloud):
        results = make_cloud().draw(load_tags("uniform"))
        assert {r.font_size for r in results} == {55}

    def test_empty_batch(self, make_cloud):
        assert make_cloud().draw([]) == []

    def test_oversized_tag_is_unplaced(self):
        class HugeRasterizer:
            def rasterize(self, text, font_family, font_size, angle, padding):
                return solid_buffer(600, 600)

        cloud = TagCloud(rasterizer=HugeRasterizer())
        (result,) = cloud.draw([TagRequest("huge", 1.0)])
        assert not result.placed
        assert result.position is None
        assert (result.x, result.y) == (-1, -1)
        assert (result.width, result.height) == (600, 600)
        assert not cloud.session.grid.cells().any()

    def test_rasterizer_called_heaviest_first(self, make_cloud, block_rasterizer):
        tags = [TagRequest("b", 1.0), TagRequest("a", 3.0), TagRequest("c", 2.0)]
        make_cloud(padding=6, angle_count=1).draw(tags)
        assert [c[0] for c in block_rasterizer.calls] == ["a", "c", "b"]
        assert {c[4] for c in block_rasterizer.calls} == {6}
        assert {c[1] for c in block_rasterizer.calls} == {"sans-serif"}

    def test_placed_masks_are_claimed(self, make_cloud):
        cloud = make_cloud()
        results = cloud.draw(load_tags("languages"))
        session = cloud.session
        assert session.masks
        for index, mask in session.masks.items():
            assert session.grid.collides(mask, *results[index].position)

    def test_unplaced_tags_leave_no_mask(self, make_cloud):
        cloud = make_cloud(width=120, height=120)
        results = cloud.draw(load_tags("crowded"))
        assert any(not r.placed for r in results)
        placed = {i for i, r in enumerate(results) if r.placed}
        assert set(cloud.session.masks) == placed


class TestBatches:
    def test_each_batch_starts_from_fresh_grid(self, make_cloud, language_tags):
        cloud = make_cloud()
        first = cloud.draw(language_tags)
        second = cloud.draw(language_tags)
        assert first[0].position == second[0].position == (100, 200)

    def test_incremental_batch_keeps_previous_tags(self, make_cloud, language_tags):
        cloud = make_cloud()
        cloud.draw(language_tags)
        filled = cloud.session.grid.fill_ratio()
        again = cloud.draw(language_tags, incremental=True)
        assert again[0].position != (100, 200)
        assert cloud.session.grid.fill_ratio() >= filled

    def test_incremental_without_previous_batch(self, make_cloud, language_tags):
        results = make_cloud().draw(language_tags, incremental=True)
        assert results[0].position == (100, 200)


class TestSilhouette:
    def test_draw_before_prepare_raises(self, make_cloud, tmp_path):
        cloud = make_cloud(mask_source=str(_silhouette_png(tmp_path / "s.png")))
        assert not cloud.ready
        with pytest.raises(NotReadyError):
            cloud.draw([TagRequest("x", 1.0)])

    def test_prepare_confines_tags_to_silhouette(self, make_cloud, tmp_path):
        cloud = make_cloud(
            mask_source=str(_silhouette_png(tmp_path / "s.png")), max_font_size=40
        )
        cloud.prepare()
        assert cloud.ready
        results = cloud.draw(load_tags("languages"))
        placed = [r for r in results if r.placed]
        assert placed
        # the left 250 px cover cell columns 0..62 at cell size 4
        assert all(_last_cell(r.x, r.width, 4) <= 62 for r in placed)

    def test_aprepare(self, make_cloud, tmp_path):
        png = _silhouette_png(tmp_path / "s.png")
        cloud = make_cloud(mask_source=png.read_bytes())
        asyncio.run(cloud.aprepare())
        assert cloud.ready
        assert cloud.draw([TagRequest("x", 1.0)])[0].placed

    def test_prepare_is_noop_without_mask(self, make_cloud):
        cloud = make_cloud()
        cloud.prepare()
        assert cloud.ready

    @pytest.mark.parametrize("source", [b"definitely not a png", "missing.png"])
    def test_undecodable_silhouette(self, make_cloud, tmp_path, source):
        if isinstance(source, str):
            source = str(tmp_path / source)
        cloud = make_cloud(mask_source=source)
        with pytest.raises(SilhouetteDecodeError):
            cloud.prepare()
        assert not cloud.ready

    def test_seed_from_buffer(self, make_cloud):
        cloud = make_cloud(width=40, height=40, cell_size=1, mask_source=b"unused")
        buffer = solid_buffer(40, 40, rgba=(0, 0, 0, 0))
        buffer.data[:10, :10] = (0, 0, 0, 255)
        cloud.seed(buffer)
        assert cloud.ready
        cells = cloud.new_session().grid.cells()
        assert not cells[:10, :10].any()
        assert cells[10:].all()
        assert cells[:, 10:].all()

    def test_set_shape(self, make_cloud):
        cloud = make_cloud(
            boundary_policy="bounded", min_font_size=8, max_font_size=20, angle_count=1
        )
        cloud.set_shape(lambda d: d.rectangle((0, 0, 99, 99), fill=(0, 0, 0, 255)))
        assert cloud.options.mask_source is None
        results = cloud.draw(
            [TagRequest("ab", 3.0), TagRequest("c", 1.0), TagRequest("de", 2.0)]
        )
        assert all(r.placed for r in results)
        for r in results:
            assert r.x >= 0 and r.y >= 0
            assert _last_cell(r.x, r.width, 4) <= 24
            assert _last_cell(r.y, r.height, 4) <= 24

    def test_set_shape_replaces_silhouette(self, make_cloud):
        cloud = make_cloud(mask_source=b"not decoded yet")
        cloud.set_shape(lambda d: d.ellipse((100, 100, 400, 400), fill="black"))
        assert cloud.ready
        assert cloud.draw([TagRequest("x", 1.0)])[0].placed

    def test_blocked_shape_leaves_corner_ink_unplaced(self):
        class CornerRasterizer:
            """16x16 buffer inked only in its bottom-right 4x4 pixels."""

            def rasterize(self, text, font_family, font_size, angle, padding):
                buffer = solid_buffer(16, 16, rgba=(0, 0, 0, 0))
                buffer.data[12:, 12:] = (0, 0, 0, 255)
                return buffer

        cloud = TagCloud(width=40, height=40, rasterizer=CornerRasterizer())
        cloud.set_shape(lambda d: None)
        (result,) = cloud.draw([TagRequest("x", 1.0)])
        assert not result.placed
        assert not cloud.session.masks


class TestConfigure:
    @pytest.mark.parametrize(
        "changes",
        [
            {"angle_count": 0},
            {"min_font_size": 50, "max_font_size": 20},
            {"cell_size": 0},
            {"width": -1},
            {"opacity_threshold": 300},
            {"luminance_threshold": 800},
            {"padding": -2},
            {"boundary_policy": "wrap"},
            {"no_such_option": 1},
        ],
    )
    def test_invalid_options_change_nothing(self, make_cloud, changes):
        cloud = make_cloud()
        before = cloud.options
        with pytest.raises(ConfigurationError):
            cloud.configure(**changes)
        assert cloud.options == before
        assert cloud.ready

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            CloudOptions(angle_count=0)

    def test_configure_rebuilds_grid(self, make_cloud, language_tags):
        cloud = make_cloud()
        cloud.draw(language_tags)
        cloud.configure(width=300, height=200)
        assert cloud.session is None
        grid = cloud.new_session().grid
        assert (grid.width, grid.height) == (300, 200)
        assert not grid.cells().any()

    def test_configure_silhouette_needs_prepare(self, make_cloud, tmp_path):
        cloud = make_cloud()
        cloud.configure(mask_source=str(_silhouette_png(tmp_path / "s.png")))
        with pytest.raises(NotReadyError):
            cloud.draw([TagRequest("x", 1.0)])
        cloud.prepare()
        assert cloud.draw([TagRequest("x", 1.0)])[0].placed

    def test_boundary_policy_from_string(self, make_cloud):
        cloud = make_cloud(boundary_policy="bounded")
        assert cloud.options.boundary_policy is BoundaryPolicy.BOUNDED
        assert cloud.new_session().grid.policy is BoundaryPolicy.BOUNDED

    def test_fractional_cell_size_is_rounded(self):
        with pytest.warns(UserWarning, match="rounded to 3"):
            options = CloudOptions(cell_size=2.6)
        assert options.cell_size == 3

    def test_keyword_overrides(self):
        cloud = TagCloud(CloudOptions(width=200), height=100)
        assert (cloud.options.width, cloud.options.height) == (200, 100)
        assert isinstance(cloud.new_session().grid, OccupancyGrid)
