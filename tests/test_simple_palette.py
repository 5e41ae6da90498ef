"""Tests for palettes.simple: simple color words, descriptions and best_match."""

import pytest

from palettes import SIMPLE_ALIASES, SIMPLE_PALETTE, TRANSPARENT, SimplePalette
from tinct_colortools import alpha_int, from_rgba8888, intensity, protan, tritan
from tinct_floatcolors import float_to_raw_int_bits


def _distance(a, b):
    return max(abs(intensity(a) - intensity(b)),
               abs(protan(a) - protan(b)),
               abs(tritan(a) - tritan(b)))


# (name, rgba8888, intensity, protan, tritan) as documented for each word
DOCUMENTED = [
    ("transparent", 0x00000000, 0.0, 0.49803922, 0.49803922),
    ("black", 0x000000FF, 0.0, 0.49803922, 0.49803922),
    ("gray", 0x808080FF, 0.5529412, 0.5019608, 0.49803922),
    ("silver", 0xB6B6B6FF, 0.7490196, 0.5019608, 0.49803922),
    ("white", 0xFFFFFFFF, 1.0, 0.5019608, 0.49803922),
    ("red", 0xFF0000FF, 0.45490196, 0.8117647, 0.72156864),
    ("orange", 0xFF7F00FF, 0.5921569, 0.64705884, 0.7529412),
    ("yellow", 0xFFFF00FF, 0.85882354, 0.44705883, 0.827451),
    ("green", 0x00FF00FF, 0.7607843, 0.27058825, 0.7647059),
    ("blue", 0x0000FFFF, 0.44313726, 0.38039216, 0.1254902),
    ("indigo", 0x520FE0FF, 0.44313726, 0.49803922, 0.2),
    ("violet", 0x9040EFFF, 0.5647059, 0.5764706, 0.25490198),
    ("purple", 0xC000FFFF, 0.59607846, 0.68235296, 0.24705882),
    ("brown", 0x8F573BFF, 0.42352942, 0.57254905, 0.5882353),
    ("pink", 0xFFA0E0FF, 0.8, 0.627451, 0.4509804),
    ("magenta", 0xF500F5FF, 0.64705884, 0.7764706, 0.30980393),
    ("brick", 0xD5524AFF, 0.5058824, 0.6862745, 0.6117647),
    ("ember", 0xF55A32FF, 0.5372549, 0.70980394, 0.68235296),
    ("salmon", 0xFF6262FF, 0.59607846, 0.72156864, 0.6117647),
    ("chocolate", 0x683818FF, 0.2901961, 0.5647059, 0.59607846),
    ("tan", 0xD2B48CFF, 0.73333335, 0.5294118, 0.58431375),
    ("bronze", 0xCE8E31FF, 0.5882353, 0.56078434, 0.6901961),
    ("cinnamon", 0xD2691DFF, 0.50980395, 0.627451, 0.69411767),
    ("apricot", 0xFFA828FF, 0.68235296, 0.5803922, 0.7490196),
    ("peach", 0xFFBF81FF, 0.78039217, 0.5686275, 0.6392157),
    ("pear", 0xD3E330FF, 0.7764706, 0.4392157, 0.7647059),
    ("saffron", 0xFFD510FF, 0.76862746, 0.5058824, 0.79607844),
    ("butter", 0xFFF288FF, 0.8862745, 0.49411765, 0.6745098),
    ("chartreuse", 0xC8FF41FF, 0.8392157, 0.39607844, 0.7647059),
    ("cactus", 0x30A000FF, 0.5137255, 0.36078432, 0.68235296),
    ("lime", 0x93D300FF, 0.6901961, 0.38431373, 0.7529412),
    ("olive", 0x818000FF, 0.4745098, 0.47058824, 0.68235296),
    ("fern", 0x4E7942FF, 0.45490196, 0.4392157, 0.5764706),
    ("moss", 0x204608FF, 0.25882354, 0.4392157, 0.5882353),
    ("celery", 0x7DFF73FF, 0.83137256, 0.34509805, 0.67058825),
    ("sage", 0xABE3C5FF, 0.8509804, 0.43529412, 0.5254902),
    ("jade", 0x3FBF3FFF, 0.62352943, 0.3529412, 0.6627451),
    ("cyan", 0x00FFFFFF, 0.9137255, 0.32941177, 0.43137255),
    ("mint", 0x7FFFD4FF, 0.9019608, 0.37254903, 0.5176471),
    ("teal", 0x007F7FFF, 0.5019608, 0.40784314, 0.4627451),
    ("turquoise", 0x2ED6C9FF, 0.7764706, 0.36078432, 0.46666667),
    ("sky", 0x86CFEBFF, 0.81960785, 0.42745098, 0.42352942),
    ("cobalt", 0x0046ABFF, 0.4117647, 0.43137255, 0.3019608),
    ("denim", 0x2870DDFF, 0.5647059, 0.42352942, 0.28627452),
    ("navy", 0x000080FF, 0.24313726, 0.43529412, 0.29411766),
    ("lavender", 0xB991FFFF, 0.74509805, 0.54901963, 0.34117648),
    ("plum", 0xBE0DC6FF, 0.5294118, 0.7137255, 0.3372549),
    ("mauve", 0xAB73ABFF, 0.6, 0.5764706, 0.43529412),
    ("rose", 0xE61E78FF, 0.50980395, 0.7882353, 0.5137255),
    ("raspberry", 0x911437FF, 0.3254902, 0.69411767, 0.5529412),
]


def _channel_bytes(packed):
    bits = float_to_raw_int_bits(packed)
    return bits & 0xFF, (bits >> 8) & 0xFF, (bits >> 16) & 0xFF


class TestDocumentedChannels:
    def test_table_matches_data_file(self, simple_palette):
        declared = [(e.name, e.rgba8888) for e in simple_palette.entries()]
        assert declared == [(name, rgba) for name, rgba, _, _, _ in DOCUMENTED]

    @pytest.mark.parametrize("name, rgba, i, p, t", DOCUMENTED)
    def test_channel_bytes_exact(self, simple_palette, name, rgba, i, p, t):
        expected = (round(i * 255), round(p * 255), round(t * 255))
        assert _channel_bytes(from_rgba8888(rgba)) == expected
        assert _channel_bytes(simple_palette[name]) == expected


class TestSimplePalette:
    def test_size(self, simple_palette):
        assert len(simple_palette) == 50
        assert isinstance(simple_palette, SimplePalette)

    def test_lowercase_words(self, simple_palette):
        assert all(name == name.lower() and " " not in name for name in simple_palette.names)

    def test_aliases_resolve(self, simple_palette):
        for alias, target in SIMPLE_ALIASES.items():
            assert simple_palette.get(alias) == simple_palette[target]
            assert alias in simple_palette.named
            assert alias not in simple_palette.names

    def test_append_includes_aliases(self, simple_palette, registry):
        count = simple_palette.append_to_known_colors(registry)
        assert count == len(simple_palette) + len(SIMPLE_ALIASES)
        assert "grey" in registry


class TestParseDescription:
    def test_single_word(self, simple_palette):
        c = simple_palette.parse_description("red")
        assert intensity(c) == intensity(simple_palette["red"])

    def test_no_color_words(self, simple_palette):
        assert simple_palette.parse_description("") == TRANSPARENT
        assert simple_palette.parse_description("light rich") == TRANSPARENT

    def test_unknown_word_is_transparent(self, simple_palette):
        assert alpha_int(simple_palette.parse_description("blorptastic")) == 0

    def test_unknown_word_thins_mix(self, simple_palette):
        assert alpha_int(simple_palette.parse_description("red blorp")) < 254

    def test_lightness_levels(self, simple_palette):
        base = intensity(simple_palette.parse_description("blue"))
        light = intensity(simple_palette.parse_description("light blue"))
        lighter = intensity(simple_palette.parse_description("lighter blue"))
        dark = intensity(simple_palette.parse_description("dark blue"))
        darkest = intensity(simple_palette.parse_description("darkest blue"))
        assert darkest < dark < base < light < lighter

    def test_saturation(self, simple_palette):
        plain = simple_palette.parse_description("orange")
        dull = simple_palette.parse_description("dull orange")
        assert abs(protan(dull) - 0.5) < abs(protan(plain) - 0.5)
        assert intensity(dull) == intensity(plain)

    def test_combined_adjectives(self, simple_palette):
        base = simple_palette.parse_description("green")
        pale = simple_palette.parse_description("pale green")
        deep = simple_palette.parse_description("deep green")
        assert intensity(pale) > intensity(base) > intensity(deep)
        assert abs(tritan(pale) - 0.5) < abs(tritan(base) - 0.5)

    def test_separators(self, simple_palette):
        assert (simple_palette.parse_description("light-red")
                == simple_palette.parse_description("light red")
                == simple_palette.parse_description("  light,red "))

    def test_repeated_word(self, simple_palette):
        assert simple_palette.parse_description("red red") == simple_palette.parse_description("red")

    def test_mix_is_between(self, simple_palette):
        black = simple_palette.parse_description("black")
        white = simple_palette.parse_description("white")
        gray = simple_palette.parse_description("black white")
        assert intensity(black) < intensity(gray) < intensity(white)

    def test_alias_in_description(self, simple_palette):
        assert simple_palette.parse_description("grey") == simple_palette.parse_description("gray")


class TestBestMatch:
    @pytest.mark.parametrize("description", ["red", "light cobalt", "dull sage"])
    def test_roundtrip_close(self, simple_palette, description):
        target = simple_palette.parse_description(description)
        found = simple_palette.best_match(target)
        assert isinstance(found, str) and found
        assert _distance(simple_palette.parse_description(found), target) <= 0.03

    def test_ignores_transparent(self, simple_palette):
        assert "transparent" not in simple_palette.best_match(TRANSPARENT)

    def test_needs_opaque_colors(self):
        from palettes import PaletteEntry
        pal = SimplePalette([PaletteEntry.from_rgba8888("clear", "CLEAR", 0)], aliases={})
        with pytest.raises(ValueError):
            pal.best_match(TRANSPARENT)
