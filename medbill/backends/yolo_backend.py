"""YOLO bill field detector using Ultralytics."""
import os
import logging
from typing import List, Dict, Any, Optional, Union
import numpy as np
from .base_backend import BaseBackend
from ..core.entities import BoundingBox, Detection
from ..core.exceptions import ModelError
from ..utils.geometry import xyxy_to_xywh

logger = logging.getLogger(__name__)

# Try to import ultralytics
HAS_ULTRALYTICS = False
try:
    from ultralytics import YOLO
    HAS_ULTRALYTICS = True
except ImportError:
    HAS_ULTRALYTICS = False

ClassNames = Union[Dict[int, str], List[str]]


def _class_name(names: Optional[ClassNames], class_id: int) -> str:
    if isinstance(names, dict):
        return str(names.get(class_id, ""))
    if names is not None and 0 <= class_id < len(names):
        return str(names[class_id])
    return ""


class YoloBackend(BaseBackend):
    """Detector backend for a YOLO model trained on bill field classes.

    Each box becomes a :class:`Detection` labelled with the model's class
    name, with the box converted to top-left corner plus width and height.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.model = None
        self.model_path = None

    def load_model(self, model_path_or_name: str) -> bool:
        """Load a YOLO model from path or model name."""
        if not HAS_ULTRALYTICS:
            raise ModelError("Ultralytics not installed. Cannot use YOLO backend.")

        try:
            self.model = YOLO(model_path_or_name)
            self.model_path = model_path_or_name
            self.is_loaded = True

            self.model_info = {
                'backend': 'ultralytics',
                'model_type': 'YOLO',
                'model_path': model_path_or_name,
                'device': str(self.model.device) if hasattr(self.model, 'device') else 'unknown'
            }

            logger.info("Loaded YOLO model: %s", model_path_or_name)
            return True

        except Exception as e:
            self.is_loaded = False
            raise ModelError(f"Failed to load YOLO model {model_path_or_name}: {e}") from e

    def predict(self, image: np.ndarray, **kwargs) -> List[Detection]:
        """Run YOLO inference on an image."""
        if not self.is_loaded or not self.model:
            raise ModelError("No model loaded")

        conf_threshold = kwargs.get('conf', self.config.get('detection_confidence_threshold', 0.4))
        iou_threshold = kwargs.get('iou', self.config.get('detection_iou_threshold', 0.3))
        verbose = kwargs.get('verbose', False)

        try:
            results = self.model(
                image,
                conf=conf_threshold,
                iou=iou_threshold,
                verbose=verbose
            )

            detections = []
            for result in results:
                if result.boxes is None:
                    continue
                boxes = result.boxes
                names = getattr(result, 'names', None) or getattr(self.model, 'names', None)

                xyxy = boxes.xyxy.cpu().numpy()  # [x1, y1, x2, y2]
                conf = boxes.conf.cpu().numpy()
                cls = boxes.cls.cpu().numpy()

                for i in range(len(xyxy)):
                    x, y, w, h = xyxy_to_xywh([float(v) for v in xyxy[i][:4]])
                    class_id = int(cls[i])
                    detections.append(Detection(
                        class_label=_class_name(names, class_id),
                        bbox=BoundingBox(x=x, y=y, width=w, height=h),
                        confidence=float(conf[i]),
                        class_id=class_id,
                    ))

            logger.debug("YOLO returned %d detections", len(detections))
            return detections

        except Exception as e:
            raise ModelError(f"YOLO prediction failed: {e}") from e

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about the loaded YOLO model."""
        if not self.is_loaded:
            return {'status': 'not_loaded'}

        info = self.model_info.copy()

        if self.model and hasattr(self.model, 'names'):
            info['num_classes'] = len(self.model.names)
            info['class_names'] = self.model.names

        return info

    def get_supported_formats(self) -> List[str]:
        """Get list of supported YOLO model formats."""
        return ['.pt', '.onnx', '.torchscript', '.pb', '.tflite', '.engine']

    def validate_model(self, model_path: str) -> bool:
        """Validate if a model file is a loadable YOLO model."""
        if not HAS_ULTRALYTICS:
            return False

        _, ext = os.path.splitext(model_path.lower())
        if ext not in self.get_supported_formats():
            return False

        if os.path.isfile(model_path) and not os.access(model_path, os.R_OK):
            return False

        try:
            YOLO(model_path)
            return True
        except Exception as e:
            logger.debug("Model validation failed for %s: %s", model_path, e)
            return False

    def unload_model(self) -> None:
        """Unload the current YOLO model."""
        if self.model:
            del self.model
            self.model = None

        super().unload_model()
        self.model_path = None
