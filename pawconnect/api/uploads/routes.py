# pawconnect/api/uploads/routes.py

import logging
from flask import request, jsonify, Blueprint, current_app
from flask_jwt_extended import jwt_required, current_user
from marshmallow import ValidationError

# 이 블루프린트에 속한 API는 '/api/upload' 접두사 URL을 갖습니다.
uploads_bp = Blueprint('uploads', __name__)


def read_image_upload(file_storage) -> bytes:
    """
    multipart 'image' 필드를 검사하고 파일 내용을 반환합니다.

    :raises ValidationError: 파일이 없거나 비어 있거나 이미지 타입이 아닌 경우
    """
    if file_storage is None or not file_storage.filename:
        raise ValidationError({"image": ["No image file provided"]})
    if not (file_storage.mimetype or "").startswith('image/'):
        raise ValidationError({"image": ["Only image files are allowed"]})

    data = file_storage.read()
    if not data:
        raise ValidationError({"image": ["Uploaded image is empty"]})
    return data


@uploads_bp.route('/', methods=['POST'])
@jwt_required()
def upload_image():
    """
    이미지를 받아 저장소에 올리고 공개 URL을 반환합니다.
    저장소가 실패하면 500과 함께 대체 이미지 URL을 돌려주어 클라이언트가 등록을 계속할 수 있게 합니다.
    """
    image = request.files.get('image')
    data = read_image_upload(image)

    result = current_app.services['storage'].relay_image(data, image.mimetype, image.filename)
    if result.degraded:
        logging.warning(f"Degraded image upload for user {current_user.user_id}")
        return jsonify({
            "error_code": "IMAGE_UPLOAD_DEGRADED",
            "message": "Image upload failed, using placeholder image",
            "imageUrl": result.image_url
        }), 500

    return jsonify({"message": "Image uploaded successfully", "imageUrl": result.image_url}), 200
