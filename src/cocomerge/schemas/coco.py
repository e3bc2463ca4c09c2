"""
Pydantic models for the COCO dataset format.

COCO has no explicit type tag for annotations or categories: the variant of an
entry is implied by which fields it carries. The discriminator functions in
this module inspect field presence in a fixed order and hand the entry to the
matching model, which then validates its own required fields.

Annotation order (first match wins):
    1. ``segments_info``                  -> panoptic segmentation
    2. ``keypoints``                      -> keypoint detection
    3. ``caption``                        -> image captioning
    4. any ``dp_*`` DensePose field       -> dense pose
    5. anything else                      -> object detection

Category order (first match wins):
    1. ``keypoints`` or ``skeleton``      -> keypoint detection
    2. ``isthing`` or ``color``           -> panoptic segmentation
    3. anything else                      -> object detection

Booleans such as ``iscrowd`` and ``isthing`` travel as the integers 0/1.
"""

from datetime import datetime, timezone
from typing import (
    Annotated,
    Any,
    ClassVar,
    Dict,
    Hashable,
    List,
    Optional,
    Tuple,
    Union,
)

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    PlainSerializer,
    Tag,
)

OBJECT_DETECTION = "object_detection"
KEYPOINT_DETECTION = "keypoint_detection"
PANOPTIC_SEGMENTATION = "panoptic_segmentation"
IMAGE_CAPTIONING = "image_captioning"
DENSE_POSE = "dense_pose"

DENSE_POSE_FIELDS = ("dp_I", "dp_U", "dp_V", "dp_x", "dp_y", "dp_masks")


def _bool_from_int(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"invalid bool value: {value!r}, expected 0 or 1")


IntBool = Annotated[
    bool, BeforeValidator(_bool_from_int), PlainSerializer(int, return_type=int)
]


class CocoModel(BaseModel):
    """Base model; unknown fields are kept and written back unchanged."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def with_id(self, new_id: int):
        return self.model_copy(update={"id": new_id})


# --- metadata ------------------------------------------------------------


class CocoInfo(CocoModel):
    year: Optional[int] = None
    version: Optional[str] = None
    description: Optional[str] = None
    contributor: Optional[str] = None
    url: Optional[str] = None
    date_created: Optional[str] = None

    @classmethod
    def fresh(cls, version: str) -> "CocoInfo":
        """Info block for a newly produced dataset."""
        now = datetime.now(timezone.utc)
        return cls(
            year=now.year,
            version=version,
            description="",
            contributor="",
            url="",
            date_created=now.isoformat(),
        )


class CocoLicense(CocoModel):
    id: int
    name: str
    url: Optional[str] = None

    def structural_key(self) -> Hashable:
        return ("license", self.name, self.url)


class CocoImage(CocoModel):
    id: int
    width: int
    height: int
    file_name: str
    license: Optional[int] = None
    flickr_url: Optional[str] = None
    coco_url: Optional[str] = None
    date_captured: Optional[str] = None


# --- categories ----------------------------------------------------------


class ObjectDetectionCategory(CocoModel):
    """Category for object detection; also used by DensePose annotations."""

    kind: ClassVar[str] = OBJECT_DETECTION

    id: int
    name: str
    supercategory: Optional[str] = None

    def structural_key(self) -> Hashable:
        return (self.kind, self.name, self.supercategory)


class KeypointDetectionCategory(CocoModel):
    kind: ClassVar[str] = KEYPOINT_DETECTION

    id: int
    name: str
    supercategory: Optional[str] = None
    keypoints: List[str]
    skeleton: List[Tuple[int, int]]

    def structural_key(self) -> Hashable:
        return (
            self.kind,
            self.name,
            self.supercategory,
            tuple(self.keypoints),
            tuple(tuple(edge) for edge in self.skeleton),
        )


class PanopticSegmentationCategory(CocoModel):
    kind: ClassVar[str] = PANOPTIC_SEGMENTATION

    id: int
    name: str
    supercategory: Optional[str] = None
    isthing: IntBool
    color: Tuple[int, int, int]

    def structural_key(self) -> Hashable:
        return (
            self.kind,
            self.name,
            self.supercategory,
            self.isthing,
            tuple(self.color),
        )


def category_kind(value: Any) -> Optional[str]:
    """Return the category variant tag for a raw dict or a model instance."""
    if not isinstance(value, dict):
        return getattr(value, "kind", None)
    if "keypoints" in value or "skeleton" in value:
        return KEYPOINT_DETECTION
    if "isthing" in value or "color" in value:
        return PANOPTIC_SEGMENTATION
    return OBJECT_DETECTION


CocoCategory = Annotated[
    Union[
        Annotated[KeypointDetectionCategory, Tag(KEYPOINT_DETECTION)],
        Annotated[PanopticSegmentationCategory, Tag(PANOPTIC_SEGMENTATION)],
        Annotated[ObjectDetectionCategory, Tag(OBJECT_DETECTION)],
    ],
    Discriminator(category_kind),
]


# --- annotations ---------------------------------------------------------


class CocoRLE(CocoModel):
    """Run-length encoded mask; ``counts`` is a list or a compressed string."""

    counts: Union[List[int], str]
    size: Tuple[int, int]


CocoSegmentation = Union[CocoRLE, List[List[float]]]
BBox = Tuple[float, float, float, float]


class CategorizedAnnotation(CocoModel):
    """Annotation variants that reference a category through ``category_id``."""

    id: int
    image_id: int
    category_id: int


class ObjectDetectionAnnotation(CategorizedAnnotation):
    kind: ClassVar[str] = OBJECT_DETECTION

    bbox: BBox
    segmentation: Optional[CocoSegmentation] = None
    area: Optional[float] = None
    iscrowd: Optional[IntBool] = None


class KeypointDetectionAnnotation(ObjectDetectionAnnotation):
    kind: ClassVar[str] = KEYPOINT_DETECTION

    # [x1, y1, v1, x2, y2, v2, ...]
    keypoints: List[float]
    num_keypoints: Optional[int] = None


class DensePoseAnnotation(CategorizedAnnotation):
    kind: ClassVar[str] = DENSE_POSE

    bbox: BBox
    area: Optional[float] = None
    iscrowd: Optional[IntBool] = None
    dp_i: List[float] = Field(alias="dp_I")
    dp_u: List[float] = Field(alias="dp_U")
    dp_v: List[float] = Field(alias="dp_V")
    dp_x: List[float]
    dp_y: List[float]
    dp_masks: List[Any]


class ImageCaptioningAnnotation(CocoModel):
    kind: ClassVar[str] = IMAGE_CAPTIONING

    id: int
    image_id: int
    caption: str


class PanopticSegmentInfo(CocoModel):
    id: int
    category_id: int
    area: Optional[float] = None
    bbox: Optional[BBox] = None
    iscrowd: Optional[IntBool] = None


class PanopticSegmentationAnnotation(CocoModel):
    """Panoptic annotation; the segment ids share the annotation id space."""

    kind: ClassVar[str] = PANOPTIC_SEGMENTATION

    image_id: int
    file_name: str
    segments_info: List[PanopticSegmentInfo]


def annotation_kind(value: Any) -> Optional[str]:
    """Return the annotation variant tag for a raw dict or a model instance."""
    if not isinstance(value, dict):
        return getattr(value, "kind", None)
    if "segments_info" in value:
        return PANOPTIC_SEGMENTATION
    if "keypoints" in value:
        return KEYPOINT_DETECTION
    if "caption" in value:
        return IMAGE_CAPTIONING
    if any(field in value for field in DENSE_POSE_FIELDS):
        return DENSE_POSE
    return OBJECT_DETECTION


CocoAnnotation = Annotated[
    Union[
        Annotated[PanopticSegmentationAnnotation, Tag(PANOPTIC_SEGMENTATION)],
        Annotated[KeypointDetectionAnnotation, Tag(KEYPOINT_DETECTION)],
        Annotated[ImageCaptioningAnnotation, Tag(IMAGE_CAPTIONING)],
        Annotated[DensePoseAnnotation, Tag(DENSE_POSE)],
        Annotated[ObjectDetectionAnnotation, Tag(OBJECT_DETECTION)],
    ],
    Discriminator(annotation_kind),
]


# --- file ----------------------------------------------------------------


class CocoFile(CocoModel):
    images: List[CocoImage]
    annotations: List[CocoAnnotation]
    info: Optional[CocoInfo] = None
    categories: Optional[List[CocoCategory]] = None
    licenses: Optional[List[CocoLicense]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CocoFile":
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict in COCO wire format; unset optional fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
