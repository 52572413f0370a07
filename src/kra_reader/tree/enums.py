"""Closed value sets used by node attributes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from kra_reader.errors import UnknownColorspace, UnknownCompositeOp


class CompositeOp(Enum):
    """Blend mode used when compositing a node onto its backdrop.

    Member values are the identifiers written in the ``compositeop``
    attribute. Several identifiers contain spaces; they are matched exactly.
    """

    NORMAL = "normal"
    ERASE = "erase"
    IN = "in"
    OUT = "out"
    ALPHA_DARKEN = "alphadarken"
    DESTINATION_IN = "destination-in"
    DESTINATION_ATOP = "destination-atop"
    XOR = "xor"
    OR = "or"
    AND = "and"
    NAND = "nand"
    NOR = "nor"
    XNOR = "xnor"
    IMPLICATION = "implication"
    NOT_IMPLICATION = "not_implication"
    CONVERSE = "converse"
    NOT_CONVERSE = "not_converse"
    PLUS = "plus"
    MINUS = "minus"
    ADD = "add"
    SUBTRACT = "subtract"
    INVERSE_SUBTRACT = "inverse_subtract"
    DIFF = "diff"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    ARC_TANGENT = "arc_tangent"
    GEOMETRIC_MEAN = "geometric_mean"
    ADDITIVE_SUBTRACTIVE = "additive_subtractive"
    NEGATION = "negation"
    MODULO = "modulo"
    MODULO_CONTINUOUS = "modulo_continuous"
    DIVISIVE_MODULO = "divisive_modulo"
    DIVISIVE_MODULO_CONTINUOUS = "divisive_modulo_continuous"
    MODULO_SHIFT = "modulo_shift"
    MODULO_SHIFT_CONTINUOUS = "modulo_shift_continuous"
    EQUIVALENCE = "equivalence"
    ALLANON = "allanon"
    PARALLEL = "parallel"
    GRAIN_MERGE = "grain_merge"
    GRAIN_EXTRACT = "grain_extract"
    EXCLUSION = "exclusion"
    HARD_MIX = "hard mix"
    HARD_MIX_PHOTOSHOP = "hard_mix_photoshop"
    HARD_MIX_SOFTER_PHOTOSHOP = "hard_mix_softer_photoshop"
    OVERLAY = "overlay"
    BEHIND = "behind"
    GREATER = "greater"
    HARD_OVERLAY = "hard overlay"
    INTERPOLATION = "interpolation"
    INTERPOLATION_2X = "interpolation 2x"
    PENUMBRA_A = "penumbra a"
    PENUMBRA_B = "penumbra b"
    PENUMBRA_C = "penumbra c"
    PENUMBRA_D = "penumbra d"
    DARKEN = "darken"
    BURN = "burn"
    LINEAR_BURN = "linear_burn"
    GAMMA_DARK = "gamma_dark"
    SHADE_IFS_ILLUSIONS = "shade_ifs_illusions"
    FOG_DARKEN_IFS_ILLUSIONS = "fog_darken_ifs_illusions"
    EASY_BURN = "easy burn"
    LIGHTEN = "lighten"
    DODGE = "dodge"
    LINEAR_DODGE = "linear_dodge"
    SCREEN = "screen"
    HARD_LIGHT = "hard_light"
    SOFT_LIGHT_IFS_ILLUSIONS = "soft_light_ifs_illusions"
    SOFT_LIGHT_PEGTOP_DELPHI = "soft_light_pegtop_delphi"
    SOFT_LIGHT = "soft_light"
    SOFT_LIGHT_SVG = "soft_light_svg"
    GAMMA_LIGHT = "gamma_light"
    GAMMA_ILLUMINATION = "gamma_illumination"
    VIVID_LIGHT = "vivid_light"
    FLAT_LIGHT = "flat_light"
    LINEAR_LIGHT = "linear light"
    PIN_LIGHT = "pin_light"
    PNORM_A = "pnorm_a"
    PNORM_B = "pnorm_b"
    SUPER_LIGHT = "super_light"
    TINT_IFS_ILLUSIONS = "tint_ifs_illusions"
    FOG_LIGHTEN_IFS_ILLUSIONS = "fog_lighten_ifs_illusions"
    EASY_DODGE = "easy dodge"
    LUMINOSITY_SAI = "luminosity_sai"
    HUE = "hue"
    COLOR = "color"
    SATURATION = "saturation"
    INC_SATURATION = "inc_saturation"
    DEC_SATURATION = "dec_saturation"
    LUMINIZE = "luminize"
    INC_LUMINOSITY = "inc_luminosity"
    DEC_LUMINOSITY = "dec_luminosity"
    HUE_HSV = "hue_hsv"
    COLOR_HSV = "color_hsv"
    SATURATION_HSV = "saturation_hsv"
    INC_SATURATION_HSV = "inc_saturation_hsv"
    DEC_SATURATION_HSV = "dec_saturation_hsv"
    VALUE = "value"
    INC_VALUE = "inc_value"
    DEC_VALUE = "dec_value"
    HUE_HSL = "hue_hsl"
    COLOR_HSL = "color_hsl"
    SATURATION_HSL = "saturation_hsl"
    INC_SATURATION_HSL = "inc_saturation_hsl"
    DEC_SATURATION_HSL = "dec_saturation_hsl"
    LIGHTNESS = "lightness"
    INC_LIGHTNESS = "inc_lightness"
    DEC_LIGHTNESS = "dec_lightness"
    HUE_HSI = "hue_hsi"
    COLOR_HSI = "color_hsi"
    SATURATION_HSI = "saturation_hsi"
    INC_SATURATION_HSI = "inc_saturation_hsi"
    DEC_SATURATION_HSI = "dec_saturation_hsi"
    INTENSITY = "intensity"
    INC_INTENSITY = "inc_intensity"
    DEC_INTENSITY = "dec_intensity"
    COPY = "copy"
    COPY_RED = "copy_red"
    COPY_GREEN = "copy_green"
    COPY_BLUE = "copy_blue"
    TANGENT_NORMALMAP = "tangent_normalmap"
    COLORIZE = "colorize"
    BUMPMAP = "bumpmap"
    COMBINE_NORMAL = "combine_normal"
    CLEAR = "clear"
    DISSOLVE = "dissolve"
    DISPLACE = "displace"
    NOCOMPOSITION = "nocomposition"
    PASS_THROUGH = "pass through"
    DARKER_COLOR = "darker color"
    LIGHTER_COLOR = "lighter color"
    UNDEFINED = "undefined"
    REFLECT = "reflect"
    GLOW = "glow"
    FREEZE = "freeze"
    HEAT = "heat"
    GLOW_HEAT = "glow_heat"
    HEAT_GLOW = "heat_glow"
    REFLECT_FREEZE = "reflect_freeze"
    FREEZE_REFLECT = "freeze_reflect"
    HEAT_GLOW_FREEZE_REFLECT_HYBRID = "heat_glow_freeze_reflect_hybrid"
    LAMBERT_LIGHTING = "lambert_lighting"
    LAMBERT_LIGHTING_GAMMA_2_2 = "lambert_lighting_gamma2.2"

    @classmethod
    def from_string(cls, value: str) -> "CompositeOp":
        """Look up a blend mode by its exact identifier.

        Raises:
            UnknownCompositeOp: If ``value`` is not in the table.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownCompositeOp(value) from None

    def __str__(self) -> str:
        return self.value


class Colorspace(Enum):
    """Pixel encoding of a document or node."""

    RGBA = "RGBA"

    @classmethod
    def default(cls) -> "Colorspace":
        return cls.RGBA

    @classmethod
    def from_string(cls, value: str) -> "Colorspace":
        """Look up a colorspace by its ``colorspacename`` identifier.

        Raises:
            UnknownColorspace: If ``value`` is not a supported colorspace.
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownColorspace(value) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InTimeline:
    """Whether a node is shown in the animation timeline.

    ``onionskin`` is only meaningful for nodes shown in the timeline and is
    None otherwise.
    """

    onionskin: Optional[bool] = None

    @classmethod
    def hidden(cls) -> "InTimeline":
        return cls(onionskin=None)

    @classmethod
    def shown(cls, onionskin: bool) -> "InTimeline":
        return cls(onionskin=onionskin)

    @property
    def is_shown(self) -> bool:
        return self.onionskin is not None

    def __bool__(self) -> bool:
        return self.is_shown

    def __str__(self) -> str:
        if not self.is_shown:
            return "not in timeline"
        return "in timeline, onionskin " + ("on" if self.onionskin else "off")
